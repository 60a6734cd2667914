"""Application-defined GameSense events."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .models import EventIcon, EventOptions

if TYPE_CHECKING:  # pragma: no cover
    from .client import GameSenseClient


class GameEvent:
    """A registered event; remembers the last value sent so bitmap renders can reuse it."""

    def __init__(self, options: EventOptions) -> None:
        self.options = options
        self.value: int = 0

    @property
    def game_id(self) -> str:
        return self.options.game_id

    @property
    def event_id(self) -> str:
        return self.options.event_id

    @property
    def min_value(self) -> int:
        return self.options.min_value

    @property
    def max_value(self) -> int:
        return self.options.max_value

    @property
    def icon(self) -> EventIcon:
        return self.options.icon

    @property
    def value_optional(self) -> bool:
        return self.options.value_optional

    def registration_payload(self) -> dict[str, Any]:
        return {
            "game": self.game_id,
            "event": self.event_id,
            "min_value": self.min_value,
            "max_value": self.max_value,
            "icon_id": int(self.icon),
            "value_optional": self.value_optional,
        }

    def send(self, client: GameSenseClient, value: int, frame: dict[str, Any] | None = None) -> None:
        client.send_event(self, value, frame=frame)

    def __repr__(self) -> str:
        return f"GameEvent({self.game_id}/{self.event_id}, value={self.value})"
