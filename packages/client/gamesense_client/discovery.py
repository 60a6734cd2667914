"""Locate the local GameSense service address from SteelSeries Engine's coreProps.json."""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path

from .errors import DiscoveryError


WINDOWS_CORE_PROPS = Path("C:/ProgramData/SteelSeries/SteelSeries Engine 3/coreProps.json")
MACOS_CORE_PROPS = Path("/Library/Application Support/SteelSeries Engine 3/coreProps.json")
ADDRESS_ENV = "GAMESENSE_ADDRESS"


def core_props_path(
    system: str | None = None,
    windows_path: Path | None = None,
    macos_path: Path | None = None,
) -> Path | None:
    system = system or platform.system()
    if system == "Windows":
        return Path(windows_path or WINDOWS_CORE_PROPS)
    if system == "Darwin":
        return Path(macos_path or MACOS_CORE_PROPS)
    return None


def read_core_props(path: Path) -> str:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise DiscoveryError(f"coreProps.json not found at {path}; is SteelSeries Engine running?") from exc
    except (OSError, ValueError) as exc:
        raise DiscoveryError(f"Could not read {path}: {exc}") from exc

    address = raw.get("address") if isinstance(raw, dict) else None
    if not address:
        raise DiscoveryError(f"No address in {path}")
    if not isinstance(address, str):
        raise DiscoveryError(f"Address in {path} is not a string: {address!r}")
    split_address(address)
    return address


def split_address(address: str) -> tuple[str, int]:
    host, sep, port = address.rpartition(":")
    if not sep or not host:
        raise DiscoveryError(f"Malformed service address: {address!r}")
    try:
        port_num = int(port)
    except ValueError as exc:
        raise DiscoveryError(f"Malformed service port in {address!r}") from exc
    if not 0 < port_num < 65536:
        raise DiscoveryError(f"Service port out of range in {address!r}")
    return host, port_num


def discover_address(
    system: str | None = None,
    windows_path: Path | None = None,
    macos_path: Path | None = None,
) -> str:
    env_address = os.environ.get(ADDRESS_ENV, "").strip()
    if env_address:
        split_address(env_address)
        return env_address

    path = core_props_path(system, windows_path=windows_path, macos_path=macos_path)
    if path is None:
        raise DiscoveryError("Unsupported platform (Windows and macOS only)")
    return read_core_props(path)
