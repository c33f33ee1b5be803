"""Helpers for writing programs: scalar and vector math, SDFs, text layout, assets, images, export."""

from . import image, num, sdf, vec2
from .canvas import BLACK, WHITE, Canvas, Pixel
from .export import export_frame, frame_filename, save_bytes
from .load import load_image, load_json, load_text
from .sort import glyph_brightness, sort_by_brightness
from .text import TextMetrics, measure, wrap
from .vec2 import Vec2

__all__ = [
    "BLACK",
    "Canvas",
    "Pixel",
    "TextMetrics",
    "Vec2",
    "WHITE",
    "export_frame",
    "frame_filename",
    "glyph_brightness",
    "image",
    "load_image",
    "load_json",
    "load_text",
    "measure",
    "num",
    "save_bytes",
    "sdf",
    "sort_by_brightness",
    "vec2",
    "wrap",
]
