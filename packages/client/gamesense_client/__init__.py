"""Client for the SteelSeries GameSense REST service."""

from .client import GameSenseClient
from .discovery import ADDRESS_ENV, core_props_path, discover_address, split_address
from .errors import DiscoveryError, GameSenseError, RequestError
from .events import GameEvent
from .models import EventIcon, EventOptions, GameOptions, ScreenDeviceType, ScreenLine, ScreenZone
from .screens import BitmapScreen, Screen, TextScreen, handler_payload

__all__ = [
    "ADDRESS_ENV",
    "BitmapScreen",
    "DiscoveryError",
    "EventIcon",
    "EventOptions",
    "GameEvent",
    "GameOptions",
    "GameSenseClient",
    "GameSenseError",
    "RequestError",
    "Screen",
    "ScreenDeviceType",
    "ScreenLine",
    "ScreenZone",
    "TextScreen",
    "core_props_path",
    "discover_address",
    "handler_payload",
    "split_address",
]
