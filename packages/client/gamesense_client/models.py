"""Typed models for games, events, screen devices, and screen lines."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any


_ID_RE = re.compile(r"^[A-Z0-9_-]+$")


def validate_id(kind: str, value: str) -> str:
    if not isinstance(value, str) or not _ID_RE.match(value):
        raise ValueError(f"{kind} must use only A-Z, 0-9, hyphen and underscore: {value!r}")
    return value


class ScreenDeviceType(str, Enum):
    SCREEN_128x36 = "screened-128x36"  # Rival 700, Rival 710
    SCREEN_128x40 = "screened-128x40"  # Apex 7, Apex 7 TKL, Apex Pro, Apex Pro TKL
    SCREEN_128x48 = "screened-128x48"  # Arctis Pro Wireless
    SCREEN_128x52 = "screened-128x52"  # GameDAC / Arctis Pro + GameDAC

    @property
    def width(self) -> int:
        return SCREEN_SIZES[self][0]

    @property
    def height(self) -> int:
        return SCREEN_SIZES[self][1]

    @property
    def size_str(self) -> str:
        return f"{self.width}x{self.height}"


SCREEN_SIZES: dict[ScreenDeviceType, tuple[int, int]] = {
    ScreenDeviceType.SCREEN_128x36: (128, 36),
    ScreenDeviceType.SCREEN_128x40: (128, 40),
    ScreenDeviceType.SCREEN_128x48: (128, 48),
    ScreenDeviceType.SCREEN_128x52: (128, 52),
}


class ScreenZone(str, Enum):
    # All current OLED devices have a single screen.
    ONE = "one"


class EventIcon(IntEnum):
    NONE = 0
    HEALTH = 1
    ARMOR = 2
    AMMO = 3
    MONEY = 4
    FLASHBANG = 5
    KILLS = 6
    HEADSHOT = 7
    HELMET = 8
    HUNGER = 10
    AIR = 11
    COMPASS = 12
    TOOL = 13
    MANA = 14
    CLOCK = 15
    LIGHTNING = 16
    ITEM = 17
    AT = 18
    MUTED = 19
    TALKING = 20
    CONNECT = 21
    DISCONNECT = 22
    MUSIC = 23
    PLAY = 24
    PAUSE = 25
    CPU = 27
    GPU = 28
    RAM = 29
    ASSISTS = 30
    CREEP_SCORE = 31
    DEAD = 32
    DRAGON = 33
    ENEMIES = 35
    GAME_START = 36
    GOLD = 37
    HEALTH_2 = 38
    KILLS_2 = 39
    MANA_2 = 40
    TEAMMATES = 41
    TIMER = 42
    TEMPERATURE = 43


@dataclass(frozen=True)
class GameOptions:
    game_id: str
    display_name: str | None = None
    developer: str | None = None
    deinitialize_timer_ms: int | None = None

    def __post_init__(self) -> None:
        validate_id("game_id", self.game_id)
        if self.deinitialize_timer_ms is not None and self.deinitialize_timer_ms < 0:
            raise ValueError("deinitialize_timer_ms must be non-negative")


@dataclass(frozen=True)
class EventOptions:
    game_id: str
    event_id: str
    min_value: int = 0
    max_value: int = 100
    icon: EventIcon = EventIcon.NONE
    value_optional: bool = False

    def __post_init__(self) -> None:
        validate_id("game_id", self.game_id)
        validate_id("event_id", self.event_id)
        if self.min_value > self.max_value:
            raise ValueError(f"min_value {self.min_value} exceeds max_value {self.max_value}")


@dataclass(frozen=True)
class ScreenLine:
    """One line of a text screen; ``arg``/``context_frame_key`` feed it from event data."""

    has_text: bool = True
    has_progress_bar: bool = False
    prefix: str | None = None
    suffix: str | None = None
    bold: bool | None = None
    wrap: bool | None = None
    arg: str | None = None
    context_frame_key: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"has-text": self.has_text}
        if self.has_progress_bar:
            payload["has-progress-bar"] = True
        optional = {
            "prefix": self.prefix,
            "suffix": self.suffix,
            "bold": self.bold,
            "wrap": self.wrap,
            "arg": self.arg,
            "context-frame-key": self.context_frame_key,
        }
        for key, value in optional.items():
            if value is not None:
                payload[key] = value
        return payload
