"""tick-spline - Cubic Bézier splines and frame-driven spline walkers."""
from __future__ import annotations

from tick_spline import vec
from tick_spline.channel import TriggerChannel
from tick_spline.config import APPROACH_TOLERANCE, WalkerConfig
from tick_spline.control_points import ControlPointSet
from tick_spline.spline import DEFAULT_SEGMENT, SNAPSHOT_VERSION, BezierSpline
from tick_spline.states import Approaching, AutoBackward, AutoForward, Idle, WalkerState
from tick_spline.trigger import Trigger
from tick_spline.types import (
    ControlPointMode,
    Direction,
    InputMode,
    InvalidControlPointsError,
    ResetLocation,
    SnapshotError,
    SplineError,
    TriggerDirection,
    TriggerId,
    TriggerMode,
    WalkerAlreadyBoundError,
    WalkerMode,
    WalkerNotBoundError,
)
from tick_spline.walker import SplineWalker, create_walker

__all__ = [
    "APPROACH_TOLERANCE",
    "Approaching",
    "AutoBackward",
    "AutoForward",
    "BezierSpline",
    "ControlPointMode",
    "ControlPointSet",
    "DEFAULT_SEGMENT",
    "Direction",
    "Idle",
    "InputMode",
    "InvalidControlPointsError",
    "ResetLocation",
    "SNAPSHOT_VERSION",
    "SnapshotError",
    "SplineError",
    "SplineWalker",
    "Trigger",
    "TriggerChannel",
    "TriggerDirection",
    "TriggerId",
    "TriggerMode",
    "WalkerAlreadyBoundError",
    "WalkerConfig",
    "WalkerMode",
    "WalkerNotBoundError",
    "WalkerState",
    "create_walker",
    "vec",
]
