"""Cell metrics measured from a surface's computed font style."""

from __future__ import annotations

from glyphgrid_surface import Surface
from glyphgrid_surface.base import parse_px

from .fonts import load_font
from .models import Metrics

_SAMPLE = "X" * 50


def calc_metrics(surface: Surface) -> Metrics:
    """Measure the width of one monospaced cell and the line height in CSS pixels."""
    style = surface.computed_style()
    font = load_font(style.font_family, style.font_size)
    cell_width = font.getlength(_SAMPLE) / len(_SAMPLE)
    cell_width += parse_px(surface.style.get("letter_spacing"), 0.0)
    if cell_width <= 0:
        # Degenerate fonts report zero advance; fall back to the usual monospace ratio.
        cell_width = style.font_size * 0.6
    line_height = style.line_height
    if line_height <= 0:
        raise ValueError(f"line height must be positive, got {line_height!r}")
    return Metrics(
        cell_width=cell_width,
        line_height=line_height,
        aspect=cell_width / line_height,
        font_family=style.font_family,
        font_size=style.font_size,
    )
