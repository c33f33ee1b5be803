"""Scrolling density ramp; even and odd rows move in opposite directions."""

from __future__ import annotations

DENSITY = "Ñ@#W$9876543210?!abc;:+=-,._ "

settings = {"fps": 30}


def main(coord, context, cursor, buffer, user_vars):
    direction = coord.y % 2 * 2 - 1
    index = (context.cols + coord.y + coord.x * direction + context.frame) % len(DENSITY)
    return DENSITY[index]
