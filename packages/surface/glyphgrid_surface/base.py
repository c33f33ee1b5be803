"""Common surface behaviour: bounds, computed font style, and event listeners."""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable

from .models import (
    DEFAULT_FONT_FAMILY,
    DEFAULT_FONT_SIZE,
    NORMAL_LINE_HEIGHT,
    Bounds,
    FontStyle,
    PointerEvent,
    PointerEventType,
    SurfaceKind,
)

Listener = Callable[[PointerEvent], None]

STYLE_FIELDS = (
    "background_color",
    "color",
    "font_family",
    "font_size",
    "font_weight",
    "letter_spacing",
    "line_height",
    "text_align",
)


def parse_px(value: Any, default: float) -> float:
    """Parse a CSS-ish length ("16px", "16", 16) into pixels."""
    if value is None or value == "":
        return default
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip().lower()
    if text.endswith("px"):
        text = text[:-2]
    try:
        return float(text)
    except ValueError:
        return default


def parse_line_height(value: Any, font_size: float) -> float:
    # Unitless numbers are multipliers of the font size, as in CSS.
    if value is None or value == "" or value == "normal":
        return font_size * NORMAL_LINE_HEIGHT
    if isinstance(value, (int, float)):
        return float(value) * font_size
    text = str(value).strip().lower()
    if text.endswith("px"):
        return parse_px(text, font_size * NORMAL_LINE_HEIGHT)
    try:
        return float(text) * font_size
    except ValueError:
        return font_size * NORMAL_LINE_HEIGHT


class Surface:
    """Base output surface with a position on the host page and a style map."""

    kind: SurfaceKind = SurfaceKind.TEXT

    def __init__(self, width: float, height: float, left: float = 0.0, top: float = 0.0) -> None:
        self.width = float(width)
        self.height = float(height)
        self.left = float(left)
        self.top = float(top)
        self.style: dict[str, Any] = {}
        self.selectable = True
        self._listeners: dict[PointerEventType, list[Listener]] = defaultdict(list)

    def bounding_rect(self) -> Bounds:
        return Bounds(left=self.left, top=self.top, width=self.width, height=self.height)

    def resize(self, width: float, height: float) -> None:
        self.width = float(width)
        self.height = float(height)

    def apply_style(self, **fields: Any) -> None:
        for key, value in fields.items():
            if key not in STYLE_FIELDS:
                raise KeyError(f"Unknown style field: {key}")
            if value is not None:
                self.style[key] = value

    def computed_style(self) -> FontStyle:
        font_size = parse_px(self.style.get("font_size"), DEFAULT_FONT_SIZE)
        weight = self.style.get("font_weight")
        return FontStyle(
            font_family=str(self.style.get("font_family") or DEFAULT_FONT_FAMILY),
            font_size=font_size,
            line_height=parse_line_height(self.style.get("line_height"), font_size),
            font_weight=None if weight is None else str(weight),
        )

    def add_listener(self, event_type: PointerEventType, listener: Listener) -> None:
        self._listeners[PointerEventType(event_type)].append(listener)

    def remove_listener(self, event_type: PointerEventType, listener: Listener) -> None:
        listeners = self._listeners.get(PointerEventType(event_type), [])
        if listener in listeners:
            listeners.remove(listener)

    def listener_count(self, event_type: PointerEventType) -> int:
        return len(self._listeners.get(PointerEventType(event_type), []))

    def dispatch(self, event: PointerEvent) -> None:
        for listener in list(self._listeners.get(event.type, [])):
            listener(event)
