"""BezierSpline - piecewise cubic curve with progress-keyed triggers."""
from __future__ import annotations

import logging
import math
import uuid
from typing import Any, Iterable, Sequence

from tick_spline import vec
from tick_spline.bezier import cubic_derivative, cubic_point
from tick_spline.channel import TriggerChannel
from tick_spline.control_points import ControlPointSet
from tick_spline.trigger import Trigger
from tick_spline.types import (
    ControlPointMode,
    Direction,
    InvalidControlPointsError,
    SnapshotError,
    TriggerId,
)
from tick_spline.vec import Vec2

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1

JOIN_EPSILON = 1e-9

DEFAULT_SEGMENT: tuple[Vec2, Vec2, Vec2, Vec2] = (
    (0.0, 0.0),
    (100.0, 0.0),
    (200.0, 0.0),
    (300.0, 0.0),
)


class BezierSpline:
    """Cubic Bézier spline evaluated over a uniform progress domain [0, 1].

    Segment ``i`` of ``n`` owns progress ``[i/n, (i+1)/n)``.  Progress is
    linear in segment count and curve parameter, not in arc length.

    Triggers are owned here, including their ``triggered`` flags, so every
    walker on the same spline observes the same fired/reset state.  Fired
    triggers are announced on ``fired``.
    """

    def __init__(
        self,
        points: Iterable[Iterable[float]] | None = None,
        modes: Sequence[ControlPointMode] | None = None,
        loop: bool = False,
    ) -> None:
        if points is None:
            points = DEFAULT_SEGMENT
        self._points = ControlPointSet(points, modes, loop)
        self._triggers: dict[TriggerId, Trigger] = {}
        self.fired = TriggerChannel()

    # -- Geometry --

    @property
    def control_points(self) -> ControlPointSet:
        return self._points

    @property
    def loop(self) -> bool:
        return self._points.loop

    @loop.setter
    def loop(self, value: bool) -> None:
        self._points.set_loop(value)

    @property
    def segment_count(self) -> int:
        return self._points.segment_count

    def get_all_points(self) -> list[Vec2]:
        return self._points.all_points()

    def _locate(self, progress: float) -> tuple[int, float]:
        n = self._points.segment_count
        if progress >= 1.0:
            return n - 1, 1.0
        scaled = max(progress, 0.0) * n
        # i/n * n can land a hair below i; joins must hit the shared anchor.
        nearest = round(scaled)
        if abs(scaled - nearest) < JOIN_EPSILON:
            scaled = float(nearest)
        i = min(int(math.floor(scaled)), n - 1)
        return i, scaled - i

    def get_point(self, progress: float) -> Vec2:
        i, t = self._locate(progress)
        return cubic_point(*self._points.segment(i), t)

    def get_direction(self, progress: float) -> Vec2:
        """Unnormalized tangent. Coincident control points yield (0, 0)."""
        i, t = self._locate(progress)
        return cubic_derivative(*self._points.segment(i), t)

    get_velocity = get_direction

    def calculate_center(self, points: Iterable[Vec2] | None = None) -> Vec2:
        """Centroid of ``points``, or of every control point when omitted."""
        if points is None:
            points = self._points.all_points()
        return vec.centroid(points)

    def translate_to(self, center: Iterable[float]) -> None:
        """Move the whole spline so its control-point centroid lands on ``center``."""
        offset = vec.sub(vec.as_vec(center), self.calculate_center())
        self._points.translate(offset)

    # -- Control point editing --

    def get_control_point(self, index: int) -> Vec2:
        return self._points.get_point(index)

    def set_control_point(self, index: int, point: Iterable[float]) -> None:
        self._points.set_point(index, point)

    def move_point(self, index: int, delta: Iterable[float]) -> None:
        self._points.move_point(index, delta)

    def get_control_point_mode(self, index: int) -> ControlPointMode:
        return self._points.get_mode(index)

    def set_control_point_mode(self, index: int, mode: ControlPointMode) -> None:
        self._points.set_mode(index, mode)

    def enforce_mode(self, index: int) -> None:
        self._points.enforce_mode(index)

    def add_segment(self, direction: Direction = Direction.FORWARD) -> None:
        self._points.add_segment(direction)

    def remove_segment(self, direction: Direction = Direction.FORWARD) -> None:
        self._points.remove_segment(direction)

    def find_point_near(self, position: Iterable[float], radius: float) -> int | None:
        """Index of the control point closest to ``position`` within ``radius``."""
        pos = vec.as_vec(position)
        best: int | None = None
        best_d2 = radius * radius
        for i, p in enumerate(self._points.all_points()):
            if self._points.loop and i == len(self._points) - 1:
                continue
            d2 = vec.distance_sq(p, pos)
            if d2 <= best_d2:
                best = i
                best_d2 = d2
        return best

    # -- Triggers --

    def add_trigger(
        self, name: str, progress: float, trigger_range: float = 0.0,
    ) -> TriggerId:
        trigger = Trigger(name=name, progress=progress, trigger_range=trigger_range)
        self._triggers[trigger.id] = trigger
        return trigger.id

    def remove_trigger(self, trigger_id: TriggerId) -> bool:
        return self._triggers.pop(trigger_id, None) is not None

    def get_trigger(self, trigger_id: TriggerId) -> Trigger | None:
        return self._triggers.get(trigger_id)

    def get_trigger_by_name(self, name: str) -> Trigger | None:
        for trigger in self._triggers.values():
            if trigger.name == name:
                return trigger
        return None

    def get_triggers(self, name: str | None = None) -> list[Trigger]:
        """Triggers in insertion order, optionally only those named ``name``."""
        if not name:
            return list(self._triggers.values())
        return [t for t in self._triggers.values() if t.name == name]

    def get_all_triggers(self) -> list[Trigger]:
        return list(self._triggers.values())

    def sorted_triggers(self) -> list[Trigger]:
        """Triggers ordered by progress. Ties keep insertion order."""
        return sorted(self._triggers.values(), key=lambda t: t.progress)

    def get_trigger_at(self, index: int | None) -> Trigger | None:
        """Trigger at ``index`` in progress order, or None when out of range."""
        if index is None or not 0 <= index < len(self._triggers):
            return None
        return self.sorted_triggers()[index]

    def index_of(self, trigger_id: TriggerId) -> int | None:
        for i, trigger in enumerate(self.sorted_triggers()):
            if trigger.id == trigger_id:
                return i
        return None

    def trigger_count(self) -> int:
        return len(self._triggers)

    def set_trigger_progress(self, trigger_id: TriggerId, progress: float) -> bool:
        trigger = self._triggers.get(trigger_id)
        if trigger is None:
            return False
        trigger.progress = progress
        return True

    def reset_triggers(self) -> None:
        for trigger in self._triggers.values():
            trigger.reset()

    def evaluate_trigger(self, trigger: Trigger, progress: float) -> bool:
        """Check ``trigger`` at ``progress``; announce on ``fired`` if it fires."""
        if not trigger.check_if_triggered(progress):
            return False
        logger.debug("Trigger %r fired at progress %.4f", trigger.name, progress)
        self.fired.emit(trigger)
        return True

    def find_trigger_near(
        self, position: Iterable[float], radius: float,
    ) -> Trigger | None:
        """Trigger whose on-curve position is closest to ``position`` within ``radius``."""
        pos = vec.as_vec(position)
        best: Trigger | None = None
        best_d2 = radius * radius
        for trigger in self._triggers.values():
            d2 = vec.distance_sq(self.get_point(trigger.progress), pos)
            if d2 <= best_d2:
                best = trigger
                best_d2 = d2
        return best

    # -- Snapshot / restore --

    def snapshot(self) -> dict[str, Any]:
        return {
            "version": SNAPSHOT_VERSION,
            "loop": self.loop,
            "points": [list(p) for p in self._points.all_points()],
            "modes": [m.name for m in self._points.all_modes()],
            "triggers": [
                {
                    "id": str(t.id),
                    "name": t.name,
                    "progress": t.progress,
                    "trigger_range": t.trigger_range,
                    "triggered": t.triggered,
                }
                for t in self._triggers.values()
            ],
        }

    @classmethod
    def restore(cls, data: dict[str, Any]) -> BezierSpline:
        version = data.get("version")
        if version != SNAPSHOT_VERSION:
            raise SnapshotError(
                f"Unsupported snapshot version {version!r}, expected {SNAPSHOT_VERSION}"
            )
        try:
            modes = [ControlPointMode[name] for name in data["modes"]]
            spline = cls(data["points"], modes, bool(data.get("loop", False)))
            for item in data.get("triggers", []):
                trigger = Trigger(
                    name=item["name"],
                    progress=item["progress"],
                    trigger_range=item.get("trigger_range", 0.0),
                    triggered=bool(item.get("triggered", False)),
                    id=uuid.UUID(item["id"]),
                )
                spline._triggers[trigger.id] = trigger
        except InvalidControlPointsError as exc:
            raise SnapshotError(f"Invalid control points in snapshot: {exc}") from exc
        except (KeyError, TypeError, ValueError) as exc:
            raise SnapshotError(f"Malformed spline snapshot: {exc!r}") from exc
        return spline
