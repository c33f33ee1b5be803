"""Circle centred on the grid, corrected for cell aspect; hold the pointer to see it uncorrected."""

from __future__ import annotations

from glyphgrid_core import Program
from glyphgrid_toolkit import Vec2, vec2


class Circle(Program):
    def __init__(self, radius: float = 0.7) -> None:
        self.user_vars = {"radius": radius}

    def main(self, coord, context, cursor, buffer, user_vars):
        aspect = 1.0 if cursor.pressed else context.metrics.aspect
        # Map to (-1, 1) on the shorter side, scaled by the cell aspect.
        m = min(context.cols * aspect, context.rows)
        st = Vec2(
            x=2.0 * (coord.x - context.cols / 2) / m * aspect,
            y=2.0 * (coord.y - context.rows / 2) / m,
        )
        return "C" if vec2.length(st) < user_vars["radius"] else "."
