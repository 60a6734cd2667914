"""Pillow conversions between images and packed framebuffers."""

from __future__ import annotations

import base64
from io import BytesIO

from PIL import Image, ImageOps

from .framebuffer import Framebuffer


def framebuffer_to_image(fb: Framebuffer, scale: int = 1) -> Image.Image:
    # Pillow's "1" raw layout matches the framebuffer: row-major, MSB first, byte-padded rows.
    image = Image.frombytes("1", (fb.width, fb.height), fb.to_bytes())
    if scale > 1:
        image = image.resize((fb.width * scale, fb.height * scale), Image.Resampling.NEAREST)
    return image


def image_to_framebuffer(
    image: Image.Image,
    width: int,
    height: int,
    threshold: int = 128,
    dither: bool = False,
) -> Framebuffer:
    """Rasterize any image onto a new ``width`` x ``height`` framebuffer.

    The image is scaled to fit and letterboxed with unlit pixels. Pixels at or
    above ``threshold`` luminance are lit unless ``dither`` is set, in which
    case Floyd-Steinberg error diffusion is used instead.
    """
    fb = Framebuffer(width, height)
    if image.mode in ("RGBA", "LA", "P"):
        image = image.convert("RGBA")
        background = Image.new("RGBA", image.size, (0, 0, 0, 255))
        image = Image.alpha_composite(background, image)
    gray = image.convert("L")
    if gray.size != (width, height):
        gray = ImageOps.pad(gray, (width, height), color=0)

    if dither:
        mono = gray.convert("1", dither=Image.Dither.FLOYDSTEINBERG)
    else:
        level = max(0, min(255, int(threshold)))
        mono = gray.point(lambda v: 255 if v >= level else 0).convert("1", dither=Image.Dither.NONE)

    fb.load_bytes(mono.tobytes())
    return fb


def preview_data_url(fb: Framebuffer, scale: int = 4) -> str:
    image = framebuffer_to_image(fb, scale=scale)
    buf = BytesIO()
    image.save(buf, format="PNG")
    b64 = base64.b64encode(buf.getvalue()).decode("ascii")
    return f"data:image/png;base64,{b64}"


def save_preview(fb: Framebuffer, path, scale: int = 4) -> None:
    framebuffer_to_image(fb, scale=scale).save(path, format="PNG")
