"""Output surfaces and frame hosts for glyphgrid runtimes."""

from .base import Surface
from .canvas_surface import CanvasSurface
from .host import CancelToken, FrameCallback, ManualHost, RealtimeHost
from .models import Bounds, FontStyle, PointerEvent, PointerEventType, SurfaceKind, TouchPoint
from .text_surface import TextSurface

__all__ = [
    "Bounds",
    "CancelToken",
    "CanvasSurface",
    "FontStyle",
    "FrameCallback",
    "ManualHost",
    "PointerEvent",
    "PointerEventType",
    "RealtimeHost",
    "Surface",
    "SurfaceKind",
    "TextSurface",
    "TouchPoint",
]
