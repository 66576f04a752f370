"""SplineWalker - frame-driven traversal of a BezierSpline."""
from __future__ import annotations

import dataclasses
import logging
import math
from typing import Any, Callable

from tick_spline import vec
from tick_spline.config import APPROACH_TOLERANCE, WalkerConfig
from tick_spline.spline import BezierSpline
from tick_spline.states import Approaching, AutoBackward, AutoForward, Idle, WalkerState
from tick_spline.trigger import Trigger
from tick_spline.types import (
    InputMode,
    ResetLocation,
    TriggerDirection,
    TriggerId,
    TriggerMode,
    WalkerAlreadyBoundError,
    WalkerMode,
    WalkerNotBoundError,
)
from tick_spline.vec import Vec2

logger = logging.getLogger(__name__)

# Reports whether a control (key, button, ...) is currently held.
InputSource = Callable[[Any], bool]
TriggerCallback = Callable[["SplineWalker", Trigger], None]


class SplineWalker:
    """Stateful cursor that advances along a spline once per ``update``.

    A walker starts unbound; ``create`` (or ``bind``) attaches it to exactly
    one spline for the rest of its life.  Progress is time-linear:
    ``elapsed / duration`` per update.  Position is re-evaluated from the
    spline every update, never integrated.

    The walker polls at most one trigger per update, the one at its current
    index in the progress-sorted trigger list.  ``on_trigger`` runs for every
    trigger the walker fires.
    """

    def __init__(self, on_trigger: TriggerCallback | None = None) -> None:
        self._spline: BezierSpline | None = None
        self._on_trigger = on_trigger

        self._mode = WalkerMode.ONCE
        self._duration = 1.0
        self.can_trigger_events = True
        self._trigger_direction = TriggerDirection.FORWARD
        self.look_forward = True
        self._turn_when_walking_backwards = False
        self._approach_tolerance = APPROACH_TOLERANCE
        self._auto_start = True

        self._progress = 0.0
        self._position: Vec2 = vec.ZERO
        self._direction: Vec2 = vec.ZERO
        self._rotation = 0.0
        self._state: WalkerState = Idle()
        self._turned = False
        self._reached_end = False
        self._trigger_index: int | None = 0
        self._last_trigger_id: TriggerId | None = None

        self._trigger_mode = TriggerMode.DYNAMIC
        self._input_mode = InputMode.NONE
        self._input_source: InputSource | None = None
        self._forward_control: Any = None
        self._backward_control: Any = None
        self._previous_input = (False, False)

    # -- Lifecycle --

    def create(
        self,
        spline: BezierSpline,
        mode: WalkerMode = WalkerMode.ONCE,
        duration: float = 1.0,
        *,
        can_trigger_events: bool = True,
        trigger_direction: TriggerDirection = TriggerDirection.FORWARD,
        auto_start: bool = True,
        look_forward: bool = True,
        turn_when_walking_backwards: bool = False,
        approach_tolerance: float = APPROACH_TOLERANCE,
    ) -> SplineWalker:
        config = WalkerConfig(
            mode=mode,
            duration=duration,
            can_trigger_events=can_trigger_events,
            trigger_direction=trigger_direction,
            auto_start=auto_start,
            look_forward=look_forward,
            turn_when_walking_backwards=turn_when_walking_backwards,
            approach_tolerance=approach_tolerance,
        )
        return self.bind(spline, config)

    def bind(self, spline: BezierSpline, config: WalkerConfig | None = None) -> SplineWalker:
        if self._spline is not None:
            raise WalkerAlreadyBoundError("SplineWalker is already bound to a spline")
        if config is None:
            config = WalkerConfig()
        self._spline = spline
        self.configure(config)
        self._auto_start = config.auto_start
        self._progress = 0.0
        self._state = AutoForward() if config.auto_start else Idle(True)
        self._reset_trigger_index(revolution=False)
        self._refresh_pose()
        logger.debug(
            "Walker bound: mode=%s duration=%s triggers=%s",
            config.mode.name, config.duration, config.trigger_direction.name,
        )
        return self

    def configure(self, config: WalkerConfig) -> None:
        """Apply ``config``. ``auto_start`` only matters at bind time."""
        self.mode = config.mode
        self.duration = config.duration
        self.can_trigger_events = config.can_trigger_events
        self._trigger_direction = config.trigger_direction
        self.look_forward = config.look_forward
        self.turn_when_walking_backwards = config.turn_when_walking_backwards
        self._approach_tolerance = config.approach_tolerance

    def reset(self, location: ResetLocation = ResetLocation.START) -> None:
        spline = self._require_spline()
        self._last_trigger_id = None
        self._progress = 0.0 if location is ResetLocation.START else 1.0
        self._trigger_index = 0
        spline.reset_triggers()
        if self._autoplay_enabled():
            self._transition(AutoForward() if self.going_forward else AutoBackward())
        else:
            self._transition(Idle(self.going_forward))
        self._refresh_pose()

    # -- Input --

    def set_input(
        self,
        forward_control: Any,
        backward_control: Any,
        source: InputSource,
        trigger_mode: TriggerMode = TriggerMode.DYNAMIC,
        device: InputMode = InputMode.KEYBOARD,
    ) -> None:
        """Drive the walker from held controls instead of autoplay.

        ``source(control)`` is asked every update whether a control is held.
        Under TRIGGER_BY_TRIGGER the walker jumps to the first trigger and
        each press moves it to the neighbouring one.
        """
        if device is InputMode.NONE:
            raise ValueError("device must be KEYBOARD or GAMEPAD; use reset_input()")
        spline = self._require_spline()
        self._input_mode = device
        self._auto_start = False
        self._input_source = source
        self._forward_control = forward_control
        self._backward_control = backward_control
        self._previous_input = self._read_input()
        self._trigger_mode = trigger_mode
        self._transition(Idle(self.going_forward))

        first = spline.get_trigger_at(0)
        if trigger_mode is TriggerMode.TRIGGER_BY_TRIGGER and first is not None:
            self._progress = first.progress
            self._trigger_index = 0
            self._refresh_pose()
        logger.debug("Walker input set: %s, %s", device.name, trigger_mode.name)

    def reset_input(self) -> None:
        self._input_mode = InputMode.NONE
        self._input_source = None
        self._auto_start = True
        self._trigger_mode = TriggerMode.DYNAMIC
        self._previous_input = (False, False)
        self._transition(AutoForward() if self.going_forward else AutoBackward())

    # -- Tick --

    def update(self, elapsed: float) -> None:
        """Advance by ``elapsed`` seconds."""
        self._require_spline()
        self._reached_end = self._progress == 0.0 or self._progress == 1.0
        held = self._read_input()

        if isinstance(self._state, (AutoForward, AutoBackward)):
            self._autoplay(elapsed)
        elif self._input_mode is not InputMode.NONE:
            self._handle_input(elapsed, held)

        if isinstance(self._state, Approaching):
            self._approach(elapsed)

        self._refresh_pose()
        self._poll_trigger()
        self._previous_input = held

    def _autoplay(self, elapsed: float) -> None:
        delta = elapsed / self._duration
        self._progress += delta if self.going_forward else -delta
        if 0.0 <= self._progress <= 1.0:
            return

        if self.mode is WalkerMode.ONCE:
            self._park(1.0 if self._progress > 1.0 else 0.0)
            return

        self._reset_trigger_index(revolution=True, at_end=self._reached_end)
        if self.mode is WalkerMode.LOOP:
            self._progress -= math.floor(self._progress)
        else:
            # Reflection is periodic in 2; the first half keeps the heading.
            r = self._progress % 2.0
            keep = r <= 1.0 if self.going_forward else r < 1.0
            self._progress = r if r <= 1.0 else 2.0 - r
            forward = self.going_forward == keep
            self._transition(AutoForward() if forward else AutoBackward())

    def _park(self, boundary: float) -> None:
        """Stop a ONCE walker on ``boundary``.

        A trigger whose window covers the boundary and that already fired
        stays fired: the walker never left its window.
        """
        spline = self._require_spline()
        dwelling = [
            t for t in spline.get_all_triggers() if t.triggered and t.in_window(boundary)
        ]
        last_id = self._last_trigger_id
        self._reset_trigger_index(revolution=True, at_end=self._reached_end)
        for trigger in dwelling:
            trigger.triggered = True
        if any(t.id == last_id for t in dwelling):
            self._last_trigger_id = last_id
        self._progress = boundary
        self._transition(Idle(self.going_forward))

    def _handle_input(self, elapsed: float, held: tuple[bool, bool]) -> None:
        forward_down, backward_down = held
        if self._trigger_mode is TriggerMode.DYNAMIC:
            if forward_down:
                self._step(elapsed, forward=True)
            elif backward_down:
                self._step(elapsed, forward=False)
            return

        was_forward, was_backward = self._previous_input
        if forward_down and not was_forward:
            self._press(forward=True)
        elif backward_down and not was_backward:
            self._press(forward=False)

    def _step(self, elapsed: float, forward: bool, lock_index: bool = False) -> bool:
        """Input-driven move by one update. Returns True when it wrapped around."""
        boundary = 1.0 if forward else 0.0
        if self._progress == boundary:
            if self.mode is WalkerMode.ONCE:
                self._reset_trigger_index(revolution=True, at_end=True)
                return False
            self._progress = 1.0 - boundary
            self._reset_trigger_index(revolution=True, at_end=True)
            logger.debug("Walker wrapped to progress %.1f", self._progress)
            return True

        delta = elapsed / self._duration
        if forward:
            self._progress = min(self._progress + delta, 1.0)
        else:
            self._progress = max(self._progress - delta, 0.0)

        if self.going_forward != forward:
            self._input_direction_changed(not forward, lock_index)
            if isinstance(self._state, Idle):
                self._transition(Idle(forward))
        return False

    def _press(self, forward: bool) -> None:
        spline = self._require_spline()
        triggers = spline.sorted_triggers()
        count = len(triggers)
        if count == 0:
            return
        once = self.mode is WalkerMode.ONCE
        index = self._trigger_index
        if forward:
            if once and index == count - 1:
                return
            target = 0 if index is None else index + 1
            if target > count - 1:
                if once:
                    return
                target = 0
        else:
            if once and index == 0:
                return
            target = count - 1 if index is None else index - 1
            if target < 0:
                if once:
                    return
                target = count - 1

        trigger = triggers[target]
        tolerance = self._approach_tolerance
        if forward:
            wrapping = trigger.progress < self._progress - tolerance
        else:
            wrapping = trigger.progress > self._progress + tolerance
        if wrapping and once:
            return

        self._trigger_index = target
        self._last_trigger_id = None
        if not trigger.in_window(self._progress):
            trigger.reset()
        self._transition(Approaching(target, forward, wrapping))

    def _approach(self, elapsed: float) -> None:
        state = self._state
        if not isinstance(state, Approaching):
            return
        target = self._require_spline().get_trigger_at(state.target)
        if target is None:
            self._transition(Idle(state.forward))
            return

        if state.wrapping:
            if not self._step(elapsed, state.forward, lock_index=True):
                return
            state = dataclasses.replace(state, wrapping=False)
            self._transition(state)
        elif not self._arrived(target, state.forward):
            self._step(elapsed, state.forward, lock_index=True)

        if self._arrived(target, state.forward):
            self._progress = target.progress
            self._transition(Idle(state.forward))

    def _arrived(self, target: Trigger, forward: bool) -> bool:
        if forward:
            return self._progress >= target.progress - self._approach_tolerance
        return self._progress <= target.progress + self._approach_tolerance

    def _transition(self, state: WalkerState) -> None:
        if state.forward != self._state.forward and self._turn_when_walking_backwards:
            self._turned = not state.forward
        self._state = state

    def _refresh_pose(self) -> None:
        spline = self._require_spline()
        if self.look_forward:
            tangent = spline.get_direction(self._progress)
            if not vec.is_zero(tangent):
                self._direction = vec.normalize(tangent)
                self._rotation = vec.heading(self._direction)
                if self._turned:
                    self._rotation -= math.pi
        self._position = spline.get_point(self._progress)

    # -- Trigger bookkeeping --

    def can_trigger(self, trigger: Trigger) -> bool:
        if self._last_trigger_id == trigger.id:
            return False
        if not self.going_forward and self._trigger_direction is TriggerDirection.FORWARD:
            return False
        if self.going_forward and self._trigger_direction is TriggerDirection.BACKWARD:
            return False
        return True

    def _poll_trigger(self) -> None:
        if not self.can_trigger_events:
            return
        spline = self._require_spline()
        trigger = spline.get_trigger_at(self._trigger_index)
        if trigger is None or not self.can_trigger(trigger):
            return
        if spline.evaluate_trigger(trigger, self._progress):
            self._trigger_fired(trigger)

    def _trigger_fired(self, trigger: Trigger) -> None:
        if self._trigger_mode is TriggerMode.DYNAMIC and self._trigger_index is not None:
            count = self._require_spline().trigger_count()
            at_end = self._progress == 0.0 or self._progress == 1.0
            if self.going_forward:
                self._trigger_index += 1
                if self._trigger_index > count - 1:
                    self._reset_trigger_index(revolution=False, at_end=at_end)
            else:
                self._trigger_index -= 1
                if self._trigger_index < 0:
                    self._reset_trigger_index(revolution=False, at_end=at_end)
        self._last_trigger_id = trigger.id
        if self._on_trigger is not None:
            self._on_trigger(self, trigger)

    def _last_index(self) -> int | None:
        count = self._require_spline().trigger_count()
        return count - 1 if count > 0 else None

    def _reset_trigger_index(self, revolution: bool, at_end: bool = False) -> None:
        """Re-point the trigger index after a lap, a boundary or the last trigger.

        Trigger flags are cleared whenever a revolution completes or the walker
        sits on an endpoint.
        """
        spline = self._require_spline()
        direction = self._trigger_direction
        self._last_trigger_id = None

        if not at_end and not revolution:
            if self._trigger_mode is TriggerMode.DYNAMIC:
                if self.going_forward and direction is not TriggerDirection.BACKWARD:
                    self._trigger_index = 0
                elif direction is not TriggerDirection.FORWARD:
                    self._trigger_index = self._last_index()
            else:
                self._trigger_index = 0
        elif self.mode is WalkerMode.PING_PONG or self._input_mode is not InputMode.NONE:
            self._place_trigger_index()
        elif self._progress >= 1.0:
            self._trigger_index = 0

        if at_end or revolution:
            spline.reset_triggers()

    def _place_trigger_index(self) -> None:
        """Boundary placement: point at the first trigger reachable from this end."""
        if self._trigger_mode is not TriggerMode.DYNAMIC:
            return
        direction = self._trigger_direction
        if self._progress >= 1.0:
            if direction is TriggerDirection.FORWARD:
                self._trigger_index = None
            else:
                self._trigger_index = self._last_index()
        elif self._progress <= 0.0:
            if direction is TriggerDirection.BACKWARD:
                self._trigger_index = None
            else:
                self._trigger_index = 0

    def _input_direction_changed(self, forward_to_backward: bool, lock_index: bool) -> None:
        if self._reached_end or self._trigger_direction is not TriggerDirection.FORWARD_AND_BACKWARD:
            return
        spline = self._require_spline()
        triggers = spline.sorted_triggers()
        count = len(triggers)
        self._last_trigger_id = None
        if count == 0:
            return

        index = self._trigger_index
        if forward_to_backward:
            if index is not None:
                if not lock_index:
                    index = index - 1 if index > 0 else None
                if self._progress > triggers[-1].progress:
                    index = count - 1
        elif not lock_index:
            index = 0 if index is None else index + 1

        if index is not None and index > count - 1:
            if all(t.triggered for t in triggers):
                if self._progress < triggers[0].progress:
                    index = 0
                else:
                    if not lock_index:
                        index = None
                    spline.reset_triggers()
            elif not lock_index:
                index -= 1
        self._trigger_index = index

        ahead = spline.get_trigger_at(index)
        if ahead is not None and not ahead.in_window(self._progress):
            ahead.reset()

    def _read_input(self) -> tuple[bool, bool]:
        if self._input_source is None or self._input_mode is InputMode.NONE:
            return (False, False)
        source = self._input_source
        return (bool(source(self._forward_control)), bool(source(self._backward_control)))

    def _autoplay_enabled(self) -> bool:
        return self._auto_start and self._input_mode is InputMode.NONE

    def _require_spline(self) -> BezierSpline:
        if self._spline is None:
            raise WalkerNotBoundError("SplineWalker is not bound to a spline")
        return self._spline

    # -- Trigger access --

    def add_trigger(self, name: str, progress: float, trigger_range: float = 0.0) -> TriggerId:
        """Register a trigger on the spline and keep the current target stable."""
        spline = self._require_spline()
        trigger_id = spline.add_trigger(name, progress, trigger_range)
        trigger = spline.get_trigger(trigger_id)
        position = spline.index_of(trigger_id)
        index = self._trigger_index
        if trigger is not None and position is not None and index is not None:
            if position <= index and trigger.progress < self._progress:
                self._trigger_index = index + 1
            elif position > index and not self.going_forward and trigger.progress < self._progress:
                self._trigger_index = position
        return trigger_id

    def get_trigger(self, trigger_id: TriggerId) -> Trigger | None:
        return self._require_spline().get_trigger(trigger_id)

    def get_trigger_at(self, index: int | None) -> Trigger | None:
        return self._require_spline().get_trigger_at(index)

    def get_triggers(self, name: str | None = None) -> list[Trigger]:
        return self._require_spline().get_triggers(name)

    def set_trigger_position(self, trigger_id: TriggerId, progress: float) -> bool:
        return self._require_spline().set_trigger_progress(trigger_id, progress)

    def get_position_on_curve(self, progress: float) -> Vec2:
        return self._require_spline().get_point(progress)

    def set_progress(self, progress: float) -> None:
        self._require_spline()
        self._progress = min(max(float(progress), 0.0), 1.0)
        self._refresh_pose()

    # -- Readouts --

    @property
    def initialized(self) -> bool:
        return self._spline is not None

    @property
    def spline(self) -> BezierSpline | None:
        return self._spline

    @property
    def progress(self) -> float:
        return self._progress

    @property
    def position(self) -> Vec2:
        return self._position

    @property
    def direction(self) -> Vec2:
        return self._direction

    @property
    def rotation(self) -> float:
        return self._rotation

    @property
    def state(self) -> WalkerState:
        return self._state

    @property
    def going_forward(self) -> bool:
        return self._state.forward

    @property
    def current_trigger_index(self) -> int | None:
        return self._trigger_index

    @property
    def last_trigger_id(self) -> TriggerId | None:
        return self._last_trigger_id

    @property
    def trigger_direction(self) -> TriggerDirection:
        return self._trigger_direction

    @property
    def trigger_mode(self) -> TriggerMode:
        return self._trigger_mode

    @property
    def input_mode(self) -> InputMode:
        return self._input_mode

    @property
    def mode(self) -> WalkerMode:
        return self._mode

    @mode.setter
    def mode(self, value: WalkerMode) -> None:
        self._mode = value
        # A ONCE walker parks at the end; other modes keep walking from there.
        if (
            value is not WalkerMode.ONCE
            and isinstance(self._state, Idle)
            and self._spline is not None
            and self._autoplay_enabled()
        ):
            self._transition(AutoForward() if self.going_forward else AutoBackward())

    @property
    def duration(self) -> float:
        return self._duration

    @duration.setter
    def duration(self, value: float) -> None:
        if value <= 0:
            raise ValueError("duration must be positive")
        self._duration = float(value)

    @property
    def turn_when_walking_backwards(self) -> bool:
        return self._turn_when_walking_backwards

    @turn_when_walking_backwards.setter
    def turn_when_walking_backwards(self, value: bool) -> None:
        self._turn_when_walking_backwards = value
        if not value:
            self._turned = False


def create_walker(
    spline: BezierSpline,
    mode: WalkerMode = WalkerMode.ONCE,
    duration: float = 1.0,
    on_trigger: TriggerCallback | None = None,
    **options: Any,
) -> SplineWalker:
    """Return a walker already bound to ``spline``."""
    return SplineWalker(on_trigger=on_trigger).create(spline, mode, duration, **options)
