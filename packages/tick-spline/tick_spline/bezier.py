"""Pure cubic Bézier evaluation. 2D."""
from __future__ import annotations

from tick_spline import vec
from tick_spline.vec import Vec2


def cubic_point(p0: Vec2, p1: Vec2, p2: Vec2, p3: Vec2, t: float) -> Vec2:
    """Bernstein blend (1-t)^3 P0 + 3(1-t)^2 t P1 + 3(1-t) t^2 P2 + t^3 P3."""
    u = 1.0 - t
    b0 = u * u * u
    b1 = 3.0 * u * u * t
    b2 = 3.0 * u * t * t
    b3 = t * t * t
    return (
        b0 * p0[0] + b1 * p1[0] + b2 * p2[0] + b3 * p3[0],
        b0 * p0[1] + b1 * p1[1] + b2 * p2[1] + b3 * p3[1],
    )


def cubic_derivative(p0: Vec2, p1: Vec2, p2: Vec2, p3: Vec2, t: float) -> Vec2:
    """First derivative: 3(1-t)^2 (P1-P0) + 6(1-t)t (P2-P1) + 3t^2 (P3-P2)."""
    u = 1.0 - t
    d0 = vec.scale(vec.sub(p1, p0), 3.0 * u * u)
    d1 = vec.scale(vec.sub(p2, p1), 6.0 * u * t)
    d2 = vec.scale(vec.sub(p3, p2), 3.0 * t * t)
    return vec.add(vec.add(d0, d1), d2)


def split_cubic(
    p0: Vec2, p1: Vec2, p2: Vec2, p3: Vec2, t: float,
) -> tuple[tuple[Vec2, Vec2, Vec2, Vec2], tuple[Vec2, Vec2, Vec2, Vec2]]:
    """de Casteljau subdivision at t. Returns (left, right) control polygons."""
    a = vec.lerp(p0, p1, t)
    b = vec.lerp(p1, p2, t)
    c = vec.lerp(p2, p3, t)
    d = vec.lerp(a, b, t)
    e = vec.lerp(b, c, t)
    mid = vec.lerp(d, e, t)
    return (p0, a, d, mid), (mid, e, c, p3)
