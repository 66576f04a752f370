"""2D vector helpers operating on tuple[float, float]."""
from __future__ import annotations

import math
from typing import Iterable

Vec2 = tuple[float, float]

ZERO: Vec2 = (0.0, 0.0)


def add(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] + b[0], a[1] + b[1])


def sub(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] - b[0], a[1] - b[1])


def scale(v: Vec2, s: float) -> Vec2:
    return (v[0] * s, v[1] * s)


def dot(a: Vec2, b: Vec2) -> float:
    return a[0] * b[0] + a[1] * b[1]


def magnitude_sq(v: Vec2) -> float:
    return v[0] * v[0] + v[1] * v[1]


def magnitude(v: Vec2) -> float:
    return math.sqrt(magnitude_sq(v))


def is_zero(v: Vec2) -> bool:
    return v[0] == 0.0 and v[1] == 0.0


def normalize(v: Vec2) -> Vec2:
    mag = magnitude(v)
    if mag == 0.0:
        return v
    return scale(v, 1.0 / mag)


def distance_sq(a: Vec2, b: Vec2) -> float:
    return magnitude_sq(sub(a, b))


def distance(a: Vec2, b: Vec2) -> float:
    return math.sqrt(distance_sq(a, b))


def lerp(a: Vec2, b: Vec2, t: float) -> Vec2:
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)


def centroid(points: Iterable[Vec2]) -> Vec2:
    """Mean of the given points. Empty input yields the origin."""
    sx = sy = 0.0
    count = 0
    for x, y in points:
        sx += x
        sy += y
        count += 1
    if count == 0:
        return ZERO
    return (sx / count, sy / count)


def heading(v: Vec2) -> float:
    """Screen-space angle with 0 pointing up (-y) and clockwise positive."""
    return math.atan2(v[0], -v[1])


def as_vec(p: Iterable[float]) -> Vec2:
    x, y = p
    return (float(x), float(y))
