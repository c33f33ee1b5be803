"""Renderer package: cell model, cell buffer, metrics, and render backends."""

from .buffer import CellBuffer, LineBounds, MergeTextResult, Offset
from .canvas_renderer import CanvasRenderer
from .fonts import is_bold, load_font
from .metrics import calc_metrics
from .models import (
    DEFAULT_SETTINGS,
    EMPTY_GLYPH,
    NULL_CELL,
    Cell,
    CellPatch,
    Context,
    Coord,
    Metrics,
    Renderer,
    RuntimeInfo,
    Settings,
    merge_cell,
    merge_settings,
    to_cell,
)
from .registry import create_renderer, list_renderers, register_renderer
from .text_renderer import TextRenderer

__all__ = [
    "Cell",
    "CellBuffer",
    "CellPatch",
    "CanvasRenderer",
    "Context",
    "Coord",
    "DEFAULT_SETTINGS",
    "EMPTY_GLYPH",
    "LineBounds",
    "MergeTextResult",
    "Metrics",
    "NULL_CELL",
    "Offset",
    "Renderer",
    "RuntimeInfo",
    "Settings",
    "TextRenderer",
    "calc_metrics",
    "create_renderer",
    "is_bold",
    "list_renderers",
    "load_font",
    "merge_cell",
    "merge_settings",
    "register_renderer",
    "to_cell",
]
