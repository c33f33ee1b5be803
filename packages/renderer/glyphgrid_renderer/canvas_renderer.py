"""Full-repaint renderer that rasterizes the cell buffer onto a Pillow canvas."""

from __future__ import annotations

import logging
import math
from typing import Any

from PIL import ImageDraw

from glyphgrid_surface import CanvasSurface, SurfaceKind

from .fonts import is_bold, load_font
from .models import Cell, Context, Settings

logger = logging.getLogger("glyphgrid.renderer")

DEFAULT_BACKGROUND = "white"
DEFAULT_COLOR = "black"
DEFAULT_WEIGHT = "400"


class CanvasRenderer:
    """Pixel surfaces have no cheap partial update, so every frame is repainted."""

    preferred_surface_kind = SurfaceKind.CANVAS

    def render(self, context: Context, buffer: Any, settings: Settings) -> None:
        canvas = settings.element
        if not isinstance(canvas, CanvasSurface):
            logger.error("canvas renderer requires a canvas surface", extra={"event": "renderer_surface_invalid"})
            return

        scale = canvas.device_pixel_ratio
        cols, rows = context.cols, context.rows
        metrics = context.metrics
        cw = metrics.cell_width
        ch = round(metrics.line_height)

        if settings.canvas_size:
            width, height = settings.canvas_size
            canvas.resize(width, height)
        else:
            width, height = context.width, context.height
        image = canvas.resize_backing(round(width * scale), round(height * scale))

        bg = settings.background_color or DEFAULT_BACKGROUND
        fg = settings.color or DEFAULT_COLOR
        weight = settings.font_weight or DEFAULT_WEIGHT
        font = load_font(metrics.font_family, metrics.font_size * scale)

        draw = ImageDraw.Draw(image)
        draw.rectangle((0, 0, image.width, image.height), fill=bg)

        ox, oy = 0.0, 0.0
        if settings.canvas_offset:
            off_x, off_y = settings.canvas_offset
            ox = round((width - cols * cw) / 2 if off_x == "auto" else float(off_x))
            oy = round((height - rows * ch) / 2 if off_y == "auto" else float(off_y))

        size = len(buffer)
        if settings.text_align == "center":
            for j in range(rows):
                offs = j * cols
                cells = [buffer[offs + i] if offs + i < size else None for i in range(cols)]
                widths = [0.0 if cell is None else draw.textlength(str(cell.char), font=font) for cell in cells]
                x = (image.width - sum(widths)) * 0.5 + ox * scale
                y = (oy + j * ch) * scale
                for cell, w in zip(cells, widths):
                    if cell is not None:
                        self._draw_cell(draw, cell, x, y, w, ch * scale, font, bg, fg, weight)
                    x += w
        else:
            for j in range(rows):
                for i in range(cols):
                    idx = j * cols + i
                    if idx >= size:
                        continue
                    x = (ox + i * cw) * scale
                    y = (oy + j * ch) * scale
                    self._draw_cell(draw, buffer[idx], x, y, cw * scale, ch * scale, font, bg, fg, weight)

    @staticmethod
    def _draw_cell(
        draw: ImageDraw.ImageDraw,
        cell: Cell,
        x: float,
        y: float,
        w: float,
        h: float,
        font,
        bg: str,
        fg: str,
        weight: str | int,
    ) -> None:
        if cell.background_color and cell.background_color != bg:
            x0 = round(x)
            draw.rectangle(
                (x0, round(y), x0 + math.ceil(w) - 1, round(y + h) - 1),
                fill=cell.background_color,
            )
        color = cell.color or fg
        stroke = 1 if is_bold(cell.font_weight or weight) else 0
        draw.text((x, y), str(cell.char), font=font, fill=color, stroke_width=stroke, stroke_fill=color)
