"""Trigger - a named progress window that fires once per dwell."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from tick_spline.types import TriggerId


def _clamp01(value: float) -> float:
    return min(max(float(value), 0.0), 1.0)


@dataclass(eq=False)
class Trigger:
    """Point of interest at ``progress`` with a firing window of half-width
    ``trigger_range``.

    ``triggered`` latches on the first check inside the window and stays set
    until ``reset()``.  Identity is the immutable ``id``.
    """

    name: str
    progress: float
    trigger_range: float = 0.0
    triggered: bool = False
    id: TriggerId = field(default_factory=uuid.uuid4)

    def __setattr__(self, name: str, value: object) -> None:
        if name == "id" and "id" in self.__dict__:
            raise AttributeError("Trigger.id is immutable")
        if name == "progress":
            value = _clamp01(value)  # type: ignore[arg-type]
        elif name == "trigger_range" and value < 0:  # type: ignore[operator]
            raise ValueError("trigger_range must be non-negative")
        object.__setattr__(self, name, value)

    def in_window(self, progress: float) -> bool:
        return abs(progress - self.progress) <= self.trigger_range

    def check_if_triggered(self, progress: float) -> bool:
        """Latch and report True on the first check inside the window."""
        if self.triggered or not self.in_window(progress):
            return False
        self.triggered = True
        return True

    def reset(self) -> None:
        self.triggered = False
