"""Typed models shared by output surfaces and frame hosts."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


DEFAULT_FONT_FAMILY = "monospace"
DEFAULT_FONT_SIZE = 16.0
# CSS "normal" line height is roughly 1.2 for common monospace faces.
NORMAL_LINE_HEIGHT = 1.2


class SurfaceKind(str, Enum):
    TEXT = "text"
    CANVAS = "canvas"


class PointerEventType(str, Enum):
    POINTER_MOVE = "pointermove"
    POINTER_DOWN = "pointerdown"
    POINTER_UP = "pointerup"
    TOUCH_START = "touchstart"
    TOUCH_MOVE = "touchmove"
    TOUCH_END = "touchend"


@dataclass(frozen=True)
class Bounds:
    left: float
    top: float
    width: float
    height: float


@dataclass(frozen=True)
class FontStyle:
    font_family: str = DEFAULT_FONT_FAMILY
    font_size: float = DEFAULT_FONT_SIZE
    line_height: float = DEFAULT_FONT_SIZE * NORMAL_LINE_HEIGHT
    font_weight: str | None = None


@dataclass(frozen=True)
class TouchPoint:
    client_x: float
    client_y: float


@dataclass(frozen=True)
class PointerEvent:
    type: PointerEventType
    client_x: float = 0.0
    client_y: float = 0.0
    touches: tuple[TouchPoint, ...] = field(default_factory=tuple)
