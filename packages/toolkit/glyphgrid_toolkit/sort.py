"""Order a character set by how much ink each glyph puts on screen."""

from __future__ import annotations

from PIL import Image, ImageDraw, ImageStat

from glyphgrid_core.logging_setup import get_logger
from glyphgrid_renderer import load_font

logger = get_logger("sort")

GLYPH_SIZE = 30


def glyph_brightness(char: str, font_family: str, size: int = GLYPH_SIZE) -> float:
    """Sum of pixel values of ``char`` drawn white on black, centred in a 2x box."""
    font = load_font(font_family, size)
    img = Image.new("L", (size * 2, size * 2), 0)
    draw = ImageDraw.Draw(img)
    draw.text((size, size), char, fill=255, font=font, anchor="mm")
    return ImageStat.Stat(img).sum[0]


def sort_by_brightness(charset: str, font_family: str = "monospace", ascending: bool = False) -> str:
    """Brightest first by default; ties keep their order from ``charset``."""
    try:
        counts = [glyph_brightness(char, font_family) for char in charset]
    except (OSError, ValueError) as exc:
        logger.warning("can't sort chars for brightness: %s", exc, extra={"event": "brightness_sort_failed"})
        return charset

    order = sorted(range(len(charset)), key=lambda i: counts[i], reverse=not ascending)
    return "".join(charset[i] for i in order)
