"""Persistent client settings schema and load/save helpers."""

from __future__ import annotations

import json
import os
import platform
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from gamesense_client import ScreenDeviceType, ScreenZone


CONFIG_VERSION = 1
DEFAULT_DEVICE_TYPE = ScreenDeviceType.SCREEN_128x40.value


@dataclass
class ServiceConfig:
    address: str | None = None
    windows_core_props: str | None = None
    macos_core_props: str | None = None
    timeout_s: float = 5.0


@dataclass
class GameConfig:
    game_id: str = "GAMESENSE_PY"
    display_name: str | None = "GameSense Python"
    developer: str | None = None
    deinitialize_timer_ms: int | None = 15000


@dataclass
class ScreenConfig:
    device_type: str = DEFAULT_DEVICE_TYPE
    zone: str = ScreenZone.ONE.value


@dataclass
class DiagnosticsConfig:
    keep_log_files: int = 7


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    service: ServiceConfig = field(default_factory=ServiceConfig)
    game: GameConfig = field(default_factory=GameConfig)
    screen: ScreenConfig = field(default_factory=ScreenConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)


def config_root() -> Path:
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "GameSense"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "GameSense"
    return Path.home() / ".config" / "gamesense"


def config_path() -> Path:
    return config_root() / "config.json"


def _merge(dataclass_type, raw: dict[str, Any]):
    defaults = dataclass_type()  # type: ignore[misc]
    if not isinstance(raw, dict):
        return defaults
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _normalize_service(cfg: AppConfig) -> None:
    try:
        timeout = float(cfg.service.timeout_s)
    except (TypeError, ValueError):
        timeout = ServiceConfig.timeout_s
    cfg.service.timeout_s = max(0.5, min(60.0, timeout))
    if not cfg.service.address:
        cfg.service.address = None


def _normalize_screen(cfg: AppConfig) -> None:
    valid_types = {t.value for t in ScreenDeviceType}
    if cfg.screen.device_type not in valid_types:
        cfg.screen.device_type = DEFAULT_DEVICE_TYPE
    if cfg.screen.zone not in {z.value for z in ScreenZone}:
        cfg.screen.zone = ScreenZone.ONE.value


def _normalize_diagnostics(cfg: AppConfig) -> None:
    cfg.diagnostics.keep_log_files = max(2, int(cfg.diagnostics.keep_log_files))


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return AppConfig()
    if not isinstance(data, dict):
        return AppConfig()

    cfg = AppConfig(
        config_version=int(data.get("config_version", CONFIG_VERSION)),
        service=_merge(ServiceConfig, data.get("service", {})),
        game=_merge(GameConfig, data.get("game", {})),
        screen=_merge(ScreenConfig, data.get("screen", {})),
        diagnostics=_merge(DiagnosticsConfig, data.get("diagnostics", {})),
    )

    _normalize_service(cfg)
    _normalize_screen(cfg)
    _normalize_diagnostics(cfg)
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path
