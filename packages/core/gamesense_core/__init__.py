"""Core app services for settings, logging, diagnostics, and screen sessions."""

from .config import AppConfig, config_path, load_config, save_config
from .diagnostics import build_doctor_payload, find_engine_processes, redact
from .logging_setup import configure_logging, get_logger
from .session import ScreenSession, SessionStatus, bitmap_screen_from_config, build_client

__all__ = [
    "AppConfig",
    "ScreenSession",
    "SessionStatus",
    "bitmap_screen_from_config",
    "build_client",
    "build_doctor_payload",
    "config_path",
    "configure_logging",
    "find_engine_processes",
    "get_logger",
    "load_config",
    "redact",
    "save_config",
]
