"""OLED screen handlers: line-based text screens and raw bitmap screens."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Union

from gamesense_bitmap import Framebuffer

from .models import ScreenDeviceType, ScreenLine, ScreenZone

if TYPE_CHECKING:  # pragma: no cover
    from .client import GameSenseClient
    from .events import GameEvent


class TextScreen:
    """Screen handler that renders an ordered list of text/progress-bar lines."""

    mode = "screen"

    def __init__(self, device_type: ScreenDeviceType, zone: ScreenZone = ScreenZone.ONE) -> None:
        self.device_type = ScreenDeviceType(device_type)
        self.zone = ScreenZone(zone)
        self._lines: list[ScreenLine] | None = None

    @property
    def lines(self) -> list[ScreenLine]:
        return list(self._lines or [])

    def add_line(self, *lines: ScreenLine) -> None:
        if self._lines is None:
            self._lines = []
        self._lines.extend(lines)

    def remove_line(self, index: int) -> None:
        if not self._lines:
            raise IndexError("screen has no lines")
        del self._lines[index]

    def clear_lines(self) -> None:
        if self._lines is not None:
            self._lines = []

    def set_lines(self, *lines: ScreenLine) -> None:
        self._lines = list(lines)

    def datas(self) -> list[dict[str, Any]]:
        if self._lines is None:
            return []
        return [{"lines": [line.to_payload() for line in self._lines]}]


class BitmapScreen:
    """Screen handler whose content is a full-screen packed bitmap."""

    mode = "screen"

    def __init__(self, device_type: ScreenDeviceType, zone: ScreenZone = ScreenZone.ONE) -> None:
        self.device_type = ScreenDeviceType(device_type)
        self.zone = ScreenZone(zone)
        self.framebuffer = Framebuffer(self.device_type.width, self.device_type.height)

    def datas(self) -> list[dict[str, Any]]:
        return [{"has-text": False, "image-data": self.framebuffer.export_bytes()}]

    def frame(self) -> dict[str, Any]:
        return {self.framebuffer.image_data_key: self.framebuffer.export_bytes()}

    def render(self, client: GameSenseClient, event: GameEvent) -> None:
        """Push the current bitmap. Only valid after the screen is bound to ``event``."""
        event.send(client, event.value, frame=self.frame())


Screen = Union[TextScreen, BitmapScreen]


def handler_payload(screen: Screen) -> dict[str, Any]:
    return {
        "device-type": screen.device_type.value,
        "zone": screen.zone.value,
        "mode": screen.mode,
        "datas": screen.datas(),
    }
