"""ControlPointSet - anchor/handle storage with tangent-mode enforcement."""
from __future__ import annotations

import logging
from typing import Iterable, Sequence

from tick_spline import vec
from tick_spline.bezier import split_cubic
from tick_spline.types import ControlPointMode, Direction, InvalidControlPointsError
from tick_spline.vec import Vec2

logger = logging.getLogger(__name__)


class ControlPointSet:
    """Ordered cubic control points: anchor, handle, handle, anchor, ...

    The backing list always holds ``3k + 1`` points for ``k >= 1`` segments.
    Every third point is an anchor and carries a ``ControlPointMode``.  A
    looped set stores the wrap anchor twice (first and last point) and the
    two copies share position and mode.
    """

    def __init__(
        self,
        points: Iterable[Iterable[float]],
        modes: Sequence[ControlPointMode] | None = None,
        loop: bool = False,
    ) -> None:
        pts = [vec.as_vec(p) for p in points]
        if loop and len(pts) >= 3 and len(pts) % 3 == 0:
            pts.append(pts[0])
        if len(pts) < 4 or (len(pts) - 1) % 3 != 0:
            raise InvalidControlPointsError(
                f"Expected 3k+1 control points with k >= 1, got {len(pts)}"
            )
        anchor_count = (len(pts) - 1) // 3 + 1
        if modes is None:
            mode_list = [ControlPointMode.FREE] * anchor_count
        else:
            mode_list = list(modes)
            if len(mode_list) != anchor_count:
                raise InvalidControlPointsError(
                    f"Expected {anchor_count} anchor modes, got {len(mode_list)}"
                )
        self._points: list[Vec2] = pts
        self._modes: list[ControlPointMode] = mode_list
        self._loop = False
        if loop:
            self.set_loop(True)

    # -- Queries --

    def __len__(self) -> int:
        return len(self._points)

    @property
    def loop(self) -> bool:
        return self._loop

    @property
    def segment_count(self) -> int:
        return (len(self._points) - 1) // 3

    @property
    def anchor_count(self) -> int:
        return len(self._modes)

    @staticmethod
    def is_anchor(index: int) -> bool:
        return index % 3 == 0

    def all_points(self) -> list[Vec2]:
        return list(self._points)

    def all_modes(self) -> list[ControlPointMode]:
        return list(self._modes)

    def segment(self, index: int) -> tuple[Vec2, Vec2, Vec2, Vec2]:
        """The four control points of segment ``index``."""
        if not 0 <= index < self.segment_count:
            raise IndexError(f"Segment {index} out of range")
        i = index * 3
        p = self._points
        return p[i], p[i + 1], p[i + 2], p[i + 3]

    def get_point(self, index: int) -> Vec2:
        self._check_index(index)
        return self._points[index]

    def get_mode(self, index: int) -> ControlPointMode:
        """Mode of the anchor owning point ``index`` (handles map to their anchor)."""
        self._check_index(index)
        return self._modes[(index + 1) // 3]

    # -- Edits --

    def set_point(self, index: int, point: Iterable[float]) -> None:
        """Move a point. Anchors drag both of their handles along."""
        self._check_index(index)
        point = vec.as_vec(point)
        pts = self._points
        n = len(pts)
        if index % 3 == 0:
            delta = vec.sub(point, pts[index])
            if self._loop:
                if index == 0:
                    pts[1] = vec.add(pts[1], delta)
                    pts[n - 2] = vec.add(pts[n - 2], delta)
                    pts[n - 1] = point
                elif index == n - 1:
                    pts[0] = point
                    pts[1] = vec.add(pts[1], delta)
                    pts[index - 1] = vec.add(pts[index - 1], delta)
                else:
                    pts[index - 1] = vec.add(pts[index - 1], delta)
                    pts[index + 1] = vec.add(pts[index + 1], delta)
            else:
                if index > 0:
                    pts[index - 1] = vec.add(pts[index - 1], delta)
                if index + 1 < n:
                    pts[index + 1] = vec.add(pts[index + 1], delta)
        pts[index] = point
        self.enforce_mode(index)

    def move_point(self, index: int, delta: Iterable[float]) -> None:
        """Offset a point by ``delta`` (same rules as ``set_point``)."""
        self.set_point(index, vec.add(self.get_point(index), vec.as_vec(delta)))

    def set_mode(self, index: int, mode: ControlPointMode) -> None:
        self._check_index(index)
        mode_index = (index + 1) // 3
        self._modes[mode_index] = mode
        if self._loop:
            if mode_index == 0:
                self._modes[-1] = mode
            elif mode_index == len(self._modes) - 1:
                self._modes[0] = mode
        self.enforce_mode(index)

    def enforce_mode(self, index: int) -> None:
        """Re-place the handle opposite ``index`` according to its anchor's mode.

        The side that was just edited stays fixed.  Editing the anchor itself
        keeps the incoming handle fixed.  Open endpoints have no opposite
        handle and are left alone.
        """
        self._check_index(index)
        mode_index = (index + 1) // 3
        mode = self._modes[mode_index]
        if mode is ControlPointMode.FREE:
            return
        if not self._loop and (mode_index == 0 or mode_index == len(self._modes) - 1):
            return

        n = len(self._points)
        middle = mode_index * 3
        if index <= middle:
            fixed = middle - 1
            if fixed < 0:
                fixed = n - 2
            enforced = middle + 1
            if enforced >= n:
                enforced = 1
        else:
            fixed = middle + 1
            if fixed >= n:
                fixed = 1
            enforced = middle - 1
            if enforced < 0:
                enforced = n - 2

        pts = self._points
        anchor = pts[middle]
        tangent = vec.sub(anchor, pts[fixed])
        if mode is ControlPointMode.ALIGNED:
            if vec.is_zero(tangent):
                return
            length = vec.distance(anchor, pts[enforced])
            tangent = vec.scale(vec.normalize(tangent), length)
        pts[enforced] = vec.add(anchor, tangent)

    def set_loop(self, loop: bool) -> None:
        self._loop = loop
        if loop:
            self._modes[-1] = self._modes[0]
            self.set_point(0, self._points[0])

    def translate(self, delta: Iterable[float]) -> None:
        d = vec.as_vec(delta)
        self._points = [vec.add(p, d) for p in self._points]

    def add_segment(self, direction: Direction = Direction.FORWARD) -> None:
        """Grow the set by one segment at the requested end.

        Open sets extend the end tangent linearly, so the new segment leaves
        the old end anchor tangent-continuous.  Looped sets have no free end;
        the segment touching the wrap anchor is split in half instead.
        """
        if self._loop:
            self._split_wrap_segment(direction)
        elif direction is Direction.FORWARD:
            pts = self._points
            anchor = pts[-1]
            d = self._end_step(anchor, pts[-2], pts[-4])
            pts.extend(
                [vec.add(anchor, vec.scale(d, k)) for k in (1.0, 2.0, 3.0)]
            )
            self._modes.append(self._modes[-1])
            self.enforce_mode(len(pts) - 4)
        else:
            pts = self._points
            anchor = pts[0]
            d = self._end_step(anchor, pts[1], pts[3])
            self._points = [
                vec.add(anchor, vec.scale(d, k)) for k in (3.0, 2.0, 1.0)
            ] + pts
            self._modes.insert(0, self._modes[0])
            self.enforce_mode(3)
        logger.debug(
            "Added %s segment, now %d segments", direction.value, self.segment_count
        )

    def remove_segment(self, direction: Direction = Direction.FORWARD) -> None:
        """Drop the segment at the requested end. At least one must remain."""
        if self.segment_count <= 1:
            raise InvalidControlPointsError("Cannot remove the only segment")
        pts = self._points
        if self._loop:
            if direction is Direction.FORWARD:
                n = len(pts)
                del pts[n - 5:n - 2]
                del self._modes[-2]
            else:
                del pts[2:5]
                del self._modes[1]
        elif direction is Direction.FORWARD:
            del pts[-3:]
            self._modes.pop()
        else:
            del pts[:3]
            self._modes.pop(0)
        logger.debug(
            "Removed %s segment, now %d segments", direction.value, self.segment_count
        )

    # -- Internal --

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._points):
            raise IndexError(
                f"Control point {index} out of range (0..{len(self._points) - 1})"
            )

    @staticmethod
    def _end_step(anchor: Vec2, handle: Vec2, other_anchor: Vec2) -> Vec2:
        d = vec.sub(anchor, handle)
        if vec.is_zero(d):
            d = vec.scale(vec.sub(anchor, other_anchor), 1.0 / 3.0)
        if vec.is_zero(d):
            d = (1.0, 0.0)
        return d

    def _split_wrap_segment(self, direction: Direction) -> None:
        pts = self._points
        if direction is Direction.FORWARD:
            start = len(pts) - 4
            mode_at = len(self._modes) - 1
            new_mode = self._modes[-2]
        else:
            start = 0
            mode_at = 1
            new_mode = self._modes[0]
        left, right = split_cubic(*pts[start:start + 4], 0.5)
        pts[start + 1:start + 3] = [left[1], left[2], left[3], right[1], right[2]]
        self._modes.insert(mode_at, new_mode)
