"""Tests for cubic Bézier evaluation helpers."""
from __future__ import annotations

import pytest

from tick_spline.bezier import cubic_derivative, cubic_point, split_cubic

P0, P1, P2, P3 = (0.0, 0.0), (0.0, 3.0), (3.0, 3.0), (3.0, 0.0)


class TestCubicPoint:
    def test_endpoints_exact(self) -> None:
        assert cubic_point(P0, P1, P2, P3, 0.0) == P0
        assert cubic_point(P0, P1, P2, P3, 1.0) == P3

    def test_midpoint(self) -> None:
        # 0.125*P0 + 0.375*P1 + 0.375*P2 + 0.125*P3
        x, y = cubic_point(P0, P1, P2, P3, 0.5)
        assert x == pytest.approx(1.5)
        assert y == pytest.approx(2.25)

    def test_evenly_spaced_line_is_linear(self) -> None:
        p = cubic_point((0.0, 0.0), (1.0, 0.0), (2.0, 0.0), (3.0, 0.0), 0.25)
        assert p == pytest.approx((0.75, 0.0))


class TestCubicDerivative:
    def test_start_tangent(self) -> None:
        # B'(0) = 3 (P1 - P0)
        assert cubic_derivative(P0, P1, P2, P3, 0.0) == (0.0, 9.0)

    def test_end_tangent(self) -> None:
        # B'(1) = 3 (P3 - P2)
        assert cubic_derivative(P0, P1, P2, P3, 1.0) == (0.0, -9.0)

    def test_coincident_points_give_zero(self) -> None:
        p = (2.0, 2.0)
        assert cubic_derivative(p, p, p, p, 0.3) == (0.0, 0.0)


class TestSplitCubic:
    def test_halves_meet_on_curve(self) -> None:
        left, right = split_cubic(P0, P1, P2, P3, 0.5)
        mid = cubic_point(P0, P1, P2, P3, 0.5)
        assert left[0] == P0
        assert right[3] == P3
        assert left[3] == pytest.approx(mid)
        assert right[0] == pytest.approx(mid)

    def test_halves_trace_parent_curve(self) -> None:
        left, right = split_cubic(P0, P1, P2, P3, 0.5)
        assert cubic_point(*left, 0.5) == pytest.approx(cubic_point(P0, P1, P2, P3, 0.25))
        assert cubic_point(*right, 0.5) == pytest.approx(cubic_point(P0, P1, P2, P3, 0.75))
