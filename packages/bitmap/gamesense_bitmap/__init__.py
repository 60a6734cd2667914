"""Packed monochrome bitmaps for GameSense OLED screens."""

from .framebuffer import Framebuffer, OutOfRangeError
from .imaging import framebuffer_to_image, image_to_framebuffer, preview_data_url, save_preview

__all__ = [
    "Framebuffer",
    "OutOfRangeError",
    "framebuffer_to_image",
    "image_to_framebuffer",
    "preview_data_url",
    "save_preview",
]
