"""Pointer/touch tracking and conversion to grid-space cursors."""

from __future__ import annotations

from dataclasses import dataclass

from glyphgrid_renderer import Metrics
from glyphgrid_surface import PointerEvent, PointerEventType, Surface


@dataclass(frozen=True)
class CursorSnapshot:
    x: float
    y: float
    pressed: bool


@dataclass(frozen=True)
class Cursor:
    x: float
    y: float
    pressed: bool
    previous: CursorSnapshot


def _clamp(value: float, count: int) -> float:
    return max(0.0, min(float(count - 1), value))


class PointerTracker:
    """Keeps the latest pixel offset (relative to the surface) and pressed state."""

    EVENT_TYPES = tuple(PointerEventType)

    def __init__(self) -> None:
        self.x = 0.0
        self.y = 0.0
        self.pressed = False
        self._previous = CursorSnapshot(x=0.0, y=0.0, pressed=False)
        self._surface: Surface | None = None

    def attach(self, surface: Surface) -> None:
        self.detach()
        self._surface = surface
        for event_type in self.EVENT_TYPES:
            surface.add_listener(event_type, self.handle)

    def detach(self) -> None:
        if self._surface is None:
            return
        for event_type in self.EVENT_TYPES:
            self._surface.remove_listener(event_type, self.handle)
        self._surface = None

    def handle(self, event: PointerEvent) -> None:
        if self._surface is None:
            return
        rect = self._surface.bounding_rect()
        kind = event.type

        if kind == PointerEventType.POINTER_MOVE:
            self.x = event.client_x - rect.left
            self.y = event.client_y - rect.top
        elif kind == PointerEventType.POINTER_DOWN:
            self.pressed = True
        elif kind == PointerEventType.POINTER_UP:
            self.pressed = False
        else:
            if kind == PointerEventType.TOUCH_START:
                self.pressed = True
            elif kind == PointerEventType.TOUCH_END:
                self.pressed = False
            if event.touches:
                touch = event.touches[0]
                self.x = touch.client_x - rect.left
                self.y = touch.client_y - rect.top

    def snapshot(self, metrics: Metrics, cols: int, rows: int) -> Cursor:
        """Return this frame's cursor in grid units and remember it as the next ``previous``."""
        current = CursorSnapshot(
            x=_clamp(self.x / metrics.cell_width, cols),
            y=_clamp(self.y / metrics.line_height, rows),
            pressed=self.pressed,
        )
        cursor = Cursor(x=current.x, y=current.y, pressed=current.pressed, previous=self._previous)
        self._previous = current
        return cursor
