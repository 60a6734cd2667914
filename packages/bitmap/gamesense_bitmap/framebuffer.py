"""Packed 1-bit framebuffer with pixel, line, and rectangle drawing."""

from __future__ import annotations

import operator


class OutOfRangeError(ValueError):
    """Raised when a draw call addresses pixels outside the buffer."""


def _dimension(name: str, value: int) -> int:
    if isinstance(value, bool):
        raise TypeError(f"{name} must be an integer")
    value = operator.index(value)
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


class Framebuffer:
    """Monochrome pixel grid stored row-major, MSB-first, one bit per pixel.

    Rows are padded to a whole byte, so the buffer is always
    ``ceil(width / 8) * height`` bytes long. Bit 7 of a byte is its leftmost
    pixel. Not thread-safe; callers sharing one buffer must serialize access.
    """

    def __init__(self, width: int, height: int) -> None:
        self._width = _dimension("width", width)
        self._height = _dimension("height", height)
        self._stride = (self._width + 7) // 8
        self._bits = bytearray(self._stride * self._height)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def stride(self) -> int:
        """Bytes per row."""
        return self._stride

    @property
    def size_str(self) -> str:
        return f"{self._width}x{self._height}"

    @property
    def image_data_key(self) -> str:
        """Event frame key the service reads bitmap updates from."""
        return f"image-data-{self.size_str}"

    def __len__(self) -> int:
        return len(self._bits)

    def __repr__(self) -> str:
        return f"Framebuffer(width={self._width}, height={self._height})"

    def _check_point(self, x: int, y: int) -> tuple[int, int]:
        x = operator.index(x)
        y = operator.index(y)
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise OutOfRangeError(f"Pixel ({x}, {y}) outside {self.size_str} buffer")
        return x, y

    def _address(self, x: int, y: int) -> tuple[int, int]:
        return y * self._stride + (x >> 3), 0x80 >> (x & 7)

    def _write(self, x: int, y: int, on: bool) -> None:
        index, mask = self._address(x, y)
        if on:
            self._bits[index] |= mask
        else:
            self._bits[index] &= ~mask & 0xFF

    def set_pixel(self, x: int, y: int, on: bool = True) -> None:
        x, y = self._check_point(x, y)
        self._write(x, y, on)

    def get_pixel(self, x: int, y: int) -> bool:
        x, y = self._check_point(x, y)
        index, mask = self._address(x, y)
        return bool(self._bits[index] & mask)

    def draw_line(self, x1: int, y1: int, x2: int, y2: int, on: bool = True) -> None:
        """Bresenham line from (x1, y1) to (x2, y2), both ends inclusive."""
        x1, y1 = self._check_point(x1, y1)
        x2, y2 = self._check_point(x2, y2)

        dx = abs(x2 - x1)
        dy = abs(y2 - y1)
        sx = 1 if x1 < x2 else -1
        sy = 1 if y1 < y2 else -1
        err = dx - dy

        while True:
            self._write(x1, y1, on)
            if x1 == x2 and y1 == y2:
                break
            e2 = 2 * err
            if e2 > -dy:
                err -= dy
                x1 += sx
            if e2 < dx:
                err += dx
                y1 += sy

    def draw_rect(self, x: int, y: int, width: int, height: int, on: bool = True) -> None:
        """Fill [x, x + width) x [y, y + height). Empty rectangles are a no-op."""
        width = operator.index(width)
        height = operator.index(height)
        if width < 0 or height < 0:
            raise OutOfRangeError(f"Rectangle size must be non-negative, got {width}x{height}")
        if width == 0 or height == 0:
            return
        x, y = self._check_point(x, y)
        self._check_point(x + width - 1, y + height - 1)

        for j in range(y, y + height):
            for i in range(x, x + width):
                self._write(i, j, on)

    def fill(self, on: bool = True) -> None:
        value = 0xFF if on else 0x00
        self._bits[:] = bytes([value]) * len(self._bits)
        if on and self._width % 8:
            # Keep row padding bits clear.
            pad_mask = (0xFF << (8 - self._width % 8)) & 0xFF
            for row in range(self._height):
                self._bits[row * self._stride + self._stride - 1] &= pad_mask

    def clear(self) -> None:
        self.fill(False)

    def count_set(self) -> int:
        return sum(bin(b).count("1") for b in self._bits)

    def export_bytes(self) -> list[int]:
        """Buffer contents as 0-255 ints in storage order, ready for JSON."""
        return list(self._bits)

    def to_bytes(self) -> bytes:
        return bytes(self._bits)

    def load_bytes(self, data: bytes) -> None:
        if len(data) != len(self._bits):
            raise ValueError(f"Bitmap data must be {len(self._bits)} bytes, got {len(data)}")
        self._bits[:] = data
