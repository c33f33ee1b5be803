"""2D signed distance functions; negative inside, positive outside.

Formulas follow Inigo Quilez, https://iquilezles.org/articles/distfunctions2d/
"""

from __future__ import annotations

import math

from . import vec2
from .num import clamp, mix
from .vec2 import SupportsXY, Vec2


def sd_circle(p: SupportsXY, radius: float) -> float:
    return vec2.length(p) - radius


def sd_box(p: SupportsXY, size: SupportsXY) -> float:
    """Axis-aligned box centred on the origin; ``size`` holds the half extents."""
    dx = math.fabs(p.x) - size.x
    dy = math.fabs(p.y) - size.y
    outside = vec2.length(Vec2(max(dx, 0.0), max(dy, 0.0)))
    return outside + min(max(dx, dy), 0.0)


def sd_segment(p: SupportsXY, a: SupportsXY, b: SupportsXY, thickness: float) -> float:
    pa = vec2.sub(p, a)
    ba = vec2.sub(b, a)
    h = clamp(vec2.dot(pa, ba) / vec2.dot(ba, ba), 0.0, 1.0)
    return vec2.length(vec2.sub(pa, vec2.mul_n(ba, h))) - thickness


def op_smooth_union(d1: float, d2: float, k: float) -> float:
    h = clamp(0.5 + 0.5 * (d2 - d1) / k, 0.0, 1.0)
    return mix(d2, d1, h) - k * h * (1.0 - h)


def op_smooth_subtraction(d1: float, d2: float, k: float) -> float:
    """Carve shape ``d1`` out of shape ``d2``."""
    h = clamp(0.5 - 0.5 * (d2 + d1) / k, 0.0, 1.0)
    return mix(d2, -d1, h) + k * h * (1.0 - h)


def op_smooth_intersection(d1: float, d2: float, k: float) -> float:
    h = clamp(0.5 - 0.5 * (d2 - d1) / k, 0.0, 1.0)
    return mix(d2, d1, h) + k * h * (1.0 - h)
