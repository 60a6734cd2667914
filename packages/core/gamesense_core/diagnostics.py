"""Diagnostics payload for the ``doctor`` command."""

from __future__ import annotations

import platform
import re
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import psutil

from gamesense_client import DiscoveryError, core_props_path, discover_address

from .config import AppConfig, config_path
from .logging_setup import log_dir


_SECRET_RE = re.compile(r"(token|secret|password|apikey|api_key|auth)", re.IGNORECASE)
_ENGINE_PROCESS_RE = re.compile(r"steelseries(engine|gg)|gg(client|engine)", re.IGNORECASE)


def redact(value: Any) -> Any:
    if isinstance(value, dict):
        out: dict[str, Any] = {}
        for k, v in value.items():
            if _SECRET_RE.search(k):
                out[k] = "***REDACTED***"
            else:
                out[k] = redact(v)
        return out
    if isinstance(value, list):
        return [redact(v) for v in value]
    return value


def find_engine_processes() -> list[dict[str, Any]]:
    """SteelSeries Engine/GG processes visible to this user."""
    found: list[dict[str, Any]] = []
    for proc in psutil.process_iter(["pid", "name"]):
        name = proc.info.get("name") or ""
        if _ENGINE_PROCESS_RE.search(name.replace(" ", "")):
            found.append({"pid": proc.info.get("pid"), "name": name})
    return found


def build_doctor_payload(cfg: AppConfig) -> dict[str, Any]:
    windows_path = Path(cfg.service.windows_core_props) if cfg.service.windows_core_props else None
    macos_path = Path(cfg.service.macos_core_props) if cfg.service.macos_core_props else None
    props = core_props_path(windows_path=windows_path, macos_path=macos_path)

    address: str | None = cfg.service.address
    address_error: str | None = None
    if not address:
        try:
            address = discover_address(windows_path=windows_path, macos_path=macos_path)
        except DiscoveryError as exc:
            address_error = str(exc)

    return {
        "ts_utc": datetime.now(timezone.utc).isoformat(),
        "platform": platform.platform(),
        "python": platform.python_version(),
        "config_path": str(config_path()),
        "log_dir": str(log_dir()),
        "config": redact(asdict(cfg)),
        "core_props": {
            "path": str(props) if props else None,
            "exists": bool(props and props.exists()),
        },
        "address": address,
        "address_error": address_error,
        "engine_processes": find_engine_processes(),
    }
