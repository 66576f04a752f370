"""Shared enums, aliases and errors for tick-spline."""
from __future__ import annotations

from enum import Enum
from uuid import UUID

TriggerId = UUID


class ControlPointMode(Enum):
    """Tangent continuity rule applied at an anchor."""

    FREE = 0
    ALIGNED = 1
    MIRRORED = 2

    def next(self) -> ControlPointMode:
        members = list(ControlPointMode)
        return members[(members.index(self) + 1) % len(members)]


class Direction(Enum):
    """Which end of the spline an edit applies to."""

    FORWARD = "forward"
    BACKWARD = "backward"


class WalkerMode(Enum):
    ONCE = 0
    LOOP = 1
    PING_PONG = 2


class TriggerDirection(Enum):
    """Walking directions in which a walker reacts to triggers."""

    FORWARD = 0
    BACKWARD = 1
    FORWARD_AND_BACKWARD = 2


class TriggerMode(Enum):
    DYNAMIC = 0
    TRIGGER_BY_TRIGGER = 1


class InputMode(Enum):
    NONE = 0
    KEYBOARD = 1
    GAMEPAD = 2


class ResetLocation(Enum):
    START = 0
    END = 1


class SplineError(Exception):
    """Base class for tick-spline errors."""


class InvalidControlPointsError(SplineError, ValueError):
    """Raised when control-point data would break the 3k+1 layout."""


class SnapshotError(SplineError):
    """Raised on restore failures (version mismatch, malformed payload)."""


class WalkerNotBoundError(SplineError, RuntimeError):
    """Raised when a walker is used before it was bound to a spline."""


class WalkerAlreadyBoundError(SplineError, RuntimeError):
    """Raised when binding a walker that already has a spline."""
