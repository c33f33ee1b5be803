"""Load an image file or URL straight into a sampling canvas."""

from __future__ import annotations

from pathlib import Path

from glyphgrid_core.logging_setup import get_logger

from .canvas import Canvas
from .load import load_image

logger = get_logger("image")


def load(source: str | Path, timeout_s: float = 30) -> Canvas:
    """Return a canvas holding the image at ``source``.

    On failure the canvas stays a blank 1x1 and a warning is logged, so
    programs can sample it unconditionally.
    """
    canvas = Canvas()
    img = load_image(source, timeout_s=timeout_s)
    if img is None:
        logger.warning("image %s unavailable; using a blank canvas", source, extra={"event": "image_load_failed"})
        return canvas
    logger.info("image %s loaded, size %sx%s", source, img.width, img.height, extra={"event": "image_loaded"})
    return canvas.draw_image(img)
