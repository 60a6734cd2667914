"""HTTP client for the local GameSense REST service."""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from pathlib import Path
from typing import Any

from .discovery import discover_address, split_address
from .errors import DiscoveryError, RequestError
from .events import GameEvent
from .models import EventOptions, GameOptions
from .screens import Screen, handler_payload


logger = logging.getLogger("gamesense.client")


class GameSenseClient:
    """Registers a game with the service and posts its events and screen bindings.

    The service address comes from ``address`` when given, otherwise from
    SteelSeries Engine's coreProps.json (Windows and macOS only). Discovery
    failures in the constructor are logged and retried on the first request.
    """

    def __init__(
        self,
        game: GameOptions,
        address: str | None = None,
        windows_core_props: Path | None = None,
        macos_core_props: Path | None = None,
        timeout_s: float = 5.0,
    ) -> None:
        self.game = game
        self.windows_core_props = windows_core_props
        self.macos_core_props = macos_core_props
        self.timeout_s = timeout_s
        self.address: str | None = None

        if address:
            split_address(address)
            self.address = address
        else:
            try:
                self.get_address()
            except DiscoveryError as exc:
                logger.warning(f"address discovery failed: {exc}", extra={"event": "discovery_failed"})

    def get_address(self) -> str:
        if self.address:
            return self.address
        self.address = discover_address(
            windows_path=self.windows_core_props,
            macos_path=self.macos_core_props,
        )
        logger.info(f"discovered service at {self.address}", extra={"event": "discovery_ok", "address": self.address})
        return self.address

    def new_event(self, event_id: str, **options: Any) -> GameEvent:
        return GameEvent(EventOptions(game_id=self.game.game_id, event_id=event_id, **options))

    def register_game(self) -> None:
        data: dict[str, Any] = {"game": self.game.game_id}
        if self.game.display_name is not None:
            data["game_display_name"] = self.game.display_name
        if self.game.developer is not None:
            data["developer"] = self.game.developer
        if self.game.deinitialize_timer_ms is not None:
            data["deinitialize_timer_length_ms"] = self.game.deinitialize_timer_ms
        self.post("/game_metadata", data)

    def register_event(self, event: GameEvent) -> None:
        """Register an event without handlers."""
        self.post("/register_game_event", event.registration_payload())

    def bind_screen(self, event: GameEvent, screen: Screen) -> None:
        data = event.registration_payload()
        data["handlers"] = [handler_payload(screen)]
        self.post("/bind_game_event", data)

    def send_event(self, event: GameEvent, value: int, frame: dict[str, Any] | None = None) -> None:
        payload: dict[str, Any] = {"value": value}
        if frame is not None:
            payload["frame"] = frame
        self.post("/game_event", {"game": event.game_id, "event": event.event_id, "data": payload})
        event.value = value

    def heartbeat(self) -> None:
        """Keep the game alive past its deinitialize timer without sending an event."""
        self.post("/game_heartbeat", {"game": self.game.game_id})

    def remove_event(self, event: GameEvent) -> None:
        self.post("/remove_game_event", {"game": event.game_id, "event": event.event_id})

    def remove_game(self) -> None:
        self.post("/remove_game", {"game": self.game.game_id})

    def post(self, path: str, data: dict[str, Any]) -> None:
        """POST ``data`` as JSON to ``path``; anything but HTTP 200 raises RequestError."""
        host, port = split_address(self.get_address())
        url = f"http://{host}:{port}{path}"
        body = json.dumps(data).encode("utf-8")
        req = urllib.request.Request(
            url,
            data=body,
            headers={"Content-Type": "application/json"},
            method="POST",
        )

        try:
            with urllib.request.urlopen(req, timeout=self.timeout_s) as resp:
                status = int(resp.status)
        except urllib.error.HTTPError as exc:
            logger.error(f"POST {path} failed status={exc.code}", extra={"event": "post_error", "path": path, "status": exc.code})
            raise RequestError(f"Invalid status code: {exc.code}", status=exc.code, path=path) from exc
        except (urllib.error.URLError, OSError) as exc:
            logger.error(f"POST {path} failed: {exc}", extra={"event": "post_error", "path": path})
            raise RequestError(f"Request to {url} failed: {exc}", path=path) from exc

        if status != 200:
            logger.error(f"POST {path} failed status={status}", extra={"event": "post_error", "path": path, "status": status})
            raise RequestError(f"Invalid status code: {status}", status=status, path=path)
        logger.debug(f"POST {path} ok bytes={len(body)}", extra={"event": "post_ok", "path": path, "status": status})
