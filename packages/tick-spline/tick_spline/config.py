"""Walker configuration dataclass."""
from __future__ import annotations

from dataclasses import dataclass

from tick_spline.types import TriggerDirection, WalkerMode

APPROACH_TOLERANCE = 0.003


@dataclass(frozen=True)
class WalkerConfig:
    """Immutable traversal settings for a SplineWalker.

    Attributes:
        mode: What happens at the spline ends (clamp, wrap or reflect).
        duration: Seconds needed to traverse the whole spline once.
        can_trigger_events: Whether the walker polls triggers at all.
        trigger_direction: Walking directions in which triggers fire.
        auto_start: Start moving on the first update without input.
        look_forward: Keep direction and rotation aligned to the tangent.
        turn_when_walking_backwards: Offset rotation by 180 degrees while
            walking backward.
        approach_tolerance: Progress distance at which a trigger-by-trigger
            approach counts as arrived.
    """

    mode: WalkerMode = WalkerMode.ONCE
    duration: float = 1.0
    can_trigger_events: bool = True
    trigger_direction: TriggerDirection = TriggerDirection.FORWARD
    auto_start: bool = True
    look_forward: bool = True
    turn_when_walking_backwards: bool = False
    approach_tolerance: float = APPROACH_TOLERANCE

    def __post_init__(self) -> None:
        if self.duration <= 0:
            raise ValueError("duration must be positive")
        if self.approach_tolerance < 0:
            raise ValueError("approach_tolerance must be non-negative")
