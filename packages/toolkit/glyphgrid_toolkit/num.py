"""Scalar shader-style math helpers for per-cell programs."""

from __future__ import annotations

import math


def map(value: float, in_a: float, in_b: float, out_a: float, out_b: float) -> float:  # noqa: A001
    """Remap ``value`` from the range [in_a, in_b] to [out_a, out_b] without clamping."""
    return out_a + (out_b - out_a) * ((value - in_a) / (in_b - in_a))


def fract(value: float) -> float:
    return value - math.floor(value)


def clamp(value: float, low: float, high: float) -> float:
    if value < low:
        return low
    if value > high:
        return high
    return value


def sign(value: float) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def mix(a: float, b: float, t: float) -> float:
    return a * (1 - t) + b * t


def step(edge: float, value: float) -> float:
    return 0.0 if value < edge else 1.0


def smoothstep(edge0: float, edge1: float, value: float) -> float:
    x = clamp((value - edge0) / (edge1 - edge0), 0.0, 1.0)
    return x * x * (3 - 2 * x)


def smootherstep(edge0: float, edge1: float, value: float) -> float:
    """Perlin's variant with zero first and second derivatives at both edges."""
    x = clamp((value - edge0) / (edge1 - edge0), 0.0, 1.0)
    return x * x * x * (x * (x * 6 - 15) + 10)


def mod(a: float, b: float) -> float:
    """Truncated remainder: the result takes the sign of ``a``, unlike Python's ``%``."""
    return math.fmod(a, b)
