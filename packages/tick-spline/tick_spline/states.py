"""Tagged motion states for SplineWalker."""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union


@dataclass(frozen=True)
class Idle:
    """Not moving on its own. ``forward`` is the heading kept from the last move."""

    forward: bool = True


@dataclass(frozen=True)
class AutoForward:
    forward: ClassVar[bool] = True


@dataclass(frozen=True)
class AutoBackward:
    forward: ClassVar[bool] = False


@dataclass(frozen=True)
class Approaching:
    """Moving toward the trigger at sorted index ``target``.

    ``wrapping`` is set while the walker still has to cross a spline end
    before it can reach the target.
    """

    target: int
    forward: bool
    wrapping: bool = False


WalkerState = Union[Idle, AutoForward, AutoBackward, Approaching]
