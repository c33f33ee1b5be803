"""Diff-based renderer that synchronizes a text surface with the cell buffer."""

from __future__ import annotations

import html
import logging
from typing import Any

from glyphgrid_surface import SurfaceKind, TextSurface

from .models import Cell, Context, Settings

logger = logging.getLogger("glyphgrid.renderer")

_NO_STYLE = (None, None, None)


class TextRenderer:
    """Renders one line node per row and rewrites only rows whose cells changed.

    The shadow buffer belongs to the renderer instance, so every surface
    needs its own renderer.
    """

    preferred_surface_kind = SurfaceKind.TEXT

    def __init__(self) -> None:
        self._shadow: list[Cell | None] = []
        self._cols = -1
        self._rows = -1
        self.rows_updated = 0

    def reset(self) -> None:
        self._shadow = [None] * len(self._shadow)

    def render(self, context: Context, buffer: Any, settings: Settings) -> None:
        surface = settings.element
        if not isinstance(surface, TextSurface):
            logger.error("text renderer requires a text surface", extra={"event": "renderer_surface_invalid"})
            return

        cols, rows = context.cols, context.rows
        if cols != self._cols or rows != self._rows:
            self._cols, self._rows = cols, rows
            self._shadow = [None] * (cols * rows)

        while surface.line_count < rows:
            surface.append_line()
        while surface.line_count > rows:
            surface.remove_last_line()

        size = len(buffer)
        updated = 0
        for j in range(rows):
            offs = j * cols
            changed = False
            for i in range(cols):
                idx = offs + i
                cell = buffer[idx] if idx < size else None
                if cell != self._shadow[idx]:
                    self._shadow[idx] = cell
                    changed = True
            if not changed:
                continue
            updated += 1
            surface.write_line(j, self._row_markup(buffer, offs, min(cols, max(size - offs, 0)), settings))

        self.rows_updated = updated

    @staticmethod
    def _row_markup(buffer: Any, offs: int, count: int, settings: Settings) -> str:
        parts: list[str] = []
        prev_style: tuple[Any, Any, Any] = _NO_STYLE
        tag_open = False

        for i in range(count):
            cell: Cell = buffer[offs + i]

            if cell.begin_markup:
                if tag_open:
                    parts.append("</span>")
                    prev_style = _NO_STYLE
                    tag_open = False
                parts.append(cell.begin_markup)

            style = cell.style_key()
            if style != prev_style:
                if tag_open:
                    parts.append("</span>")
                parts.append(_open_span(cell, settings))
                tag_open = True

            parts.append(html.escape(str(cell.char), quote=False))
            prev_style = style

            if cell.end_markup:
                if tag_open:
                    parts.append("</span>")
                    prev_style = _NO_STYLE
                    tag_open = False
                parts.append(cell.end_markup)

        if tag_open:
            parts.append("</span>")
        return "".join(parts)


def _open_span(cell: Cell, settings: Settings) -> str:
    # Attributes equal to the surface defaults are inherited, so leave them out.
    css = ""
    if cell.color and cell.color != settings.color:
        css += f"color:{cell.color};"
    if cell.background_color and cell.background_color != settings.background_color:
        css += f"background:{cell.background_color};"
    if cell.font_weight and cell.font_weight != settings.font_weight:
        css += f"font-weight:{cell.font_weight};"
    if css:
        return f'<span style="{css}">'
    return "<span>"
