"""Immutable 2D vectors and component-wise helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol


class SupportsXY(Protocol):
    x: float
    y: float


@dataclass(frozen=True)
class Vec2:
    x: float = 0.0
    y: float = 0.0


def add(a: SupportsXY, b: SupportsXY) -> Vec2:
    return Vec2(a.x + b.x, a.y + b.y)


def sub(a: SupportsXY, b: SupportsXY) -> Vec2:
    return Vec2(a.x - b.x, a.y - b.y)


def mul(a: SupportsXY, b: SupportsXY) -> Vec2:
    return Vec2(a.x * b.x, a.y * b.y)


def div(a: SupportsXY, b: SupportsXY) -> Vec2:
    return Vec2(a.x / b.x, a.y / b.y)


def add_n(a: SupportsXY, k: float) -> Vec2:
    return Vec2(a.x + k, a.y + k)


def sub_n(a: SupportsXY, k: float) -> Vec2:
    return Vec2(a.x - k, a.y - k)


def mul_n(a: SupportsXY, k: float) -> Vec2:
    return Vec2(a.x * k, a.y * k)


def div_n(a: SupportsXY, k: float) -> Vec2:
    return Vec2(a.x / k, a.y / k)


def dot(a: SupportsXY, b: SupportsXY) -> float:
    return a.x * b.x + a.y * b.y


def length(a: SupportsXY) -> float:
    return math.sqrt(a.x * a.x + a.y * a.y)


def length_sq(a: SupportsXY) -> float:
    return a.x * a.x + a.y * a.y


def dist(a: SupportsXY, b: SupportsXY) -> float:
    return math.sqrt(dist_sq(a, b))


def dist_sq(a: SupportsXY, b: SupportsXY) -> float:
    dx = a.x - b.x
    dy = a.y - b.y
    return dx * dx + dy * dy


def norm(a: SupportsXY) -> Vec2:
    """Unit vector in the direction of ``a``; near-zero vectors map to (0, 0)."""
    size = length(a)
    if size > 0.00001:
        return Vec2(a.x / size, a.y / size)
    return Vec2(0.0, 0.0)


def neg(a: SupportsXY) -> Vec2:
    return Vec2(-a.x, -a.y)


def rot(a: SupportsXY, angle: float) -> Vec2:
    s = math.sin(angle)
    c = math.cos(angle)
    return Vec2(a.x * c - a.y * s, a.x * s + a.y * c)


def mix(a: SupportsXY, b: SupportsXY, t: float) -> Vec2:
    return Vec2((1 - t) * a.x + t * b.x, (1 - t) * a.y + t * b.y)


def abs(a: SupportsXY) -> Vec2:  # noqa: A001
    return Vec2(math.fabs(a.x), math.fabs(a.y))


def max(a: SupportsXY, b: SupportsXY) -> Vec2:  # noqa: A001
    return Vec2(a.x if a.x > b.x else b.x, a.y if a.y > b.y else b.y)


def min(a: SupportsXY, b: SupportsXY) -> Vec2:  # noqa: A001
    return Vec2(a.x if a.x < b.x else b.x, a.y if a.y < b.y else b.y)


def fract(a: SupportsXY) -> Vec2:
    return Vec2(a.x - math.floor(a.x), a.y - math.floor(a.y))


def floor(a: SupportsXY) -> Vec2:
    return Vec2(float(math.floor(a.x)), float(math.floor(a.y)))


def ceil(a: SupportsXY) -> Vec2:
    return Vec2(float(math.ceil(a.x)), float(math.ceil(a.y)))


def round(a: SupportsXY) -> Vec2:  # noqa: A001
    # Half-way values round up, not to even.
    return Vec2(float(math.floor(a.x + 0.5)), float(math.floor(a.y + 0.5)))
