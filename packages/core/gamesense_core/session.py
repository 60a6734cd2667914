"""Screen session: one game, one event, one bound screen, serialized behind a lock."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from gamesense_client import (
    BitmapScreen,
    EventOptions,
    GameEvent,
    GameOptions,
    GameSenseClient,
    GameSenseError,
    Screen,
    ScreenDeviceType,
    ScreenZone,
)

from .config import AppConfig
from .logging_setup import get_logger


logger = get_logger("session")


def build_client(cfg: AppConfig) -> GameSenseClient:
    game = GameOptions(
        game_id=cfg.game.game_id,
        display_name=cfg.game.display_name,
        developer=cfg.game.developer,
        deinitialize_timer_ms=cfg.game.deinitialize_timer_ms,
    )
    return GameSenseClient(
        game,
        address=cfg.service.address,
        windows_core_props=Path(cfg.service.windows_core_props) if cfg.service.windows_core_props else None,
        macos_core_props=Path(cfg.service.macos_core_props) if cfg.service.macos_core_props else None,
        timeout_s=cfg.service.timeout_s,
    )


def bitmap_screen_from_config(cfg: AppConfig) -> BitmapScreen:
    return BitmapScreen(ScreenDeviceType(cfg.screen.device_type), ScreenZone(cfg.screen.zone))


@dataclass
class SessionStatus:
    connected: bool = False
    frames_sent: int = 0
    events_sent: int = 0
    last_value: int = 0
    last_error: str | None = None


class ScreenSession:
    def __init__(self, client: GameSenseClient, event: GameEvent, screen: Screen) -> None:
        if event.game_id != client.game.game_id:
            raise ValueError(f"Event belongs to {event.game_id}, client is {client.game.game_id}")
        self.client = client
        self.event = event
        self.screen = screen
        self._status = SessionStatus()
        self._lock = threading.RLock()
        self._events: list[dict[str, Any]] = []

    @classmethod
    def from_config(cls, cfg: AppConfig, event_id: str, screen: Screen | None = None, **event_options: Any) -> ScreenSession:
        client = build_client(cfg)
        event = GameEvent(EventOptions(game_id=cfg.game.game_id, event_id=event_id, **event_options))
        return cls(client, event, screen if screen is not None else bitmap_screen_from_config(cfg))

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def lock(self) -> threading.RLock:
        """Hold while drawing on the screen's framebuffer from another thread."""
        return self._lock

    def recent_events(self, limit: int = 200) -> list[dict[str, Any]]:
        if limit <= 0:
            return []
        return self._events[-limit:]

    def _log_event(self, event: str, **fields: Any) -> None:
        row = {
            "ts_utc": datetime.now(timezone.utc).isoformat(),
            "event": event,
            "connected": self._status.connected,
        }
        row.update(fields)
        self._events.append(row)
        if len(self._events) > 1000:
            self._events = self._events[-1000:]

    def _fail(self, event: str, exc: GameSenseError) -> None:
        self._status.last_error = str(exc)
        self._log_event(event, error=str(exc))
        logger.error(
            f"{event}: {exc}",
            extra={"event": event, "game": self.event.game_id, "event_id": self.event.event_id},
        )

    def connect(self) -> None:
        with self._lock:
            self._log_event("connect_start", game=self.client.game.game_id, event_id=self.event.event_id)
            try:
                self.client.register_game()
                self.client.register_event(self.event)
                self.client.bind_screen(self.event, self.screen)
            except GameSenseError as exc:
                self._status.connected = False
                self._fail("connect_error", exc)
                raise
            self._status.connected = True
            self._status.last_error = None
            self._log_event("connect_ok", address=self.client.address)
            logger.info(
                f"bound {self.screen.device_type.value} screen to {self.event.event_id}",
                extra={"event": "connect_ok", "game": self.event.game_id, "event_id": self.event.event_id},
            )

    def send(self, value: int) -> None:
        with self._lock:
            if not self._status.connected:
                self.connect()
            try:
                self.event.send(self.client, value)
            except GameSenseError as exc:
                self._fail("send_error", exc)
                raise
            self._status.events_sent += 1
            self._status.last_value = value
            self._log_event("send_ok", value=value)

    def render(self, value: int | None = None) -> None:
        """Push the bitmap screen's current framebuffer.

        Sends ``value`` alongside the frame when given, otherwise the event's
        last value.
        """
        with self._lock:
            if not isinstance(self.screen, BitmapScreen):
                raise TypeError("render() requires a BitmapScreen")
            if not self._status.connected:
                self.connect()
            try:
                if value is None:
                    self.screen.render(self.client, self.event)
                else:
                    self.event.send(self.client, value, frame=self.screen.frame())
            except GameSenseError as exc:
                self._fail("render_error", exc)
                raise
            self._status.frames_sent += 1
            self._status.last_value = self.event.value
            self._log_event("render_ok", lit_pixels=self.screen.framebuffer.count_set())

    def heartbeat(self) -> None:
        with self._lock:
            try:
                self.client.heartbeat()
            except GameSenseError as exc:
                self._fail("heartbeat_error", exc)
                raise
            self._log_event("heartbeat")

    def disconnect(self, remove_game: bool = False) -> None:
        with self._lock:
            if remove_game and self._status.connected:
                try:
                    self.client.remove_game()
                except GameSenseError as exc:
                    self._fail("remove_error", exc)
                    raise
            self._status.connected = False
            self._log_event("disconnect", removed=remove_game)
