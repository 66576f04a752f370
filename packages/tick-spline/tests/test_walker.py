"""Tests for SplineWalker lifecycle, autoplay modes and trigger polling."""
from __future__ import annotations

import math

import pytest

from tick_spline import (
    AutoBackward,
    AutoForward,
    BezierSpline,
    Idle,
    ResetLocation,
    SplineWalker,
    Trigger,
    TriggerDirection,
    WalkerAlreadyBoundError,
    WalkerConfig,
    WalkerMode,
    WalkerNotBoundError,
    create_walker,
)


def make_line(segments: int = 2) -> BezierSpline:
    """Straight spline along +x, 300 units per segment."""
    spline = BezierSpline()
    for _ in range(segments - 1):
        spline.add_segment()
    return spline


def record_fires(walker_fires: list[tuple[str, bool]]):
    def on_trigger(walker: SplineWalker, trigger: Trigger) -> None:
        walker_fires.append((trigger.name, walker.going_forward))
    return on_trigger


class TestLifecycle:
    def test_unbound_walker(self) -> None:
        walker = SplineWalker()
        assert not walker.initialized
        assert walker.spline is None
        with pytest.raises(WalkerNotBoundError):
            walker.update(0.1)
        with pytest.raises(WalkerNotBoundError):
            walker.reset()
        with pytest.raises(WalkerNotBoundError):
            walker.set_progress(0.5)

    def test_create_binds(self) -> None:
        spline = make_line()
        walker = SplineWalker().create(spline, WalkerMode.LOOP, 2.0)
        assert walker.initialized
        assert walker.spline is spline
        assert walker.mode is WalkerMode.LOOP
        assert walker.duration == 2.0
        assert walker.progress == 0.0
        assert walker.state == AutoForward()

    def test_double_bind_rejected(self) -> None:
        walker = create_walker(make_line())
        with pytest.raises(WalkerAlreadyBoundError):
            walker.create(make_line())

    def test_bind_with_config(self) -> None:
        config = WalkerConfig(mode=WalkerMode.PING_PONG, duration=4.0, auto_start=False)
        walker = SplineWalker().bind(make_line(), config)
        assert walker.mode is WalkerMode.PING_PONG
        assert walker.state == Idle(True)
        walker.update(1.0)
        assert walker.progress == 0.0

    def test_invalid_duration(self) -> None:
        with pytest.raises(ValueError):
            create_walker(make_line(), duration=0.0)
        walker = create_walker(make_line())
        with pytest.raises(ValueError):
            walker.duration = -1.0

    def test_initial_pose(self) -> None:
        walker = create_walker(make_line())
        assert walker.position == (0.0, 0.0)
        assert walker.direction == pytest.approx((1.0, 0.0))


class TestAutoplay:
    def test_progress_is_time_linear(self) -> None:
        walker = create_walker(make_line(), WalkerMode.ONCE, 4.0)
        walker.update(1.0)
        assert walker.progress == pytest.approx(0.25)
        assert walker.position == pytest.approx((150.0, 0.0))

    def test_once_clamps_at_end(self) -> None:
        walker = create_walker(make_line(), WalkerMode.ONCE, 1.0)
        walker.update(1.5)
        assert walker.progress == 1.0
        assert walker.going_forward
        assert walker.state == Idle(True)
        walker.update(0.5)
        assert walker.progress == 1.0
        assert walker.position == pytest.approx((600.0, 0.0))

    def test_loop_wraps(self) -> None:
        walker = create_walker(make_line(), WalkerMode.LOOP, 1.0)
        walker.update(1.5)
        assert walker.progress == pytest.approx(0.5)
        assert walker.going_forward

    def test_loop_wraps_more_than_once(self) -> None:
        walker = create_walker(make_line(), WalkerMode.LOOP, 1.0)
        walker.update(2.25)
        assert walker.progress == pytest.approx(0.25)

    def test_ping_pong_reflects(self) -> None:
        walker = create_walker(make_line(), WalkerMode.PING_PONG, 1.0)
        walker.update(1.2)
        assert walker.progress == pytest.approx(0.8)
        assert not walker.going_forward
        assert walker.state == AutoBackward()

    def test_ping_pong_reflects_at_start(self) -> None:
        walker = create_walker(make_line(), WalkerMode.PING_PONG, 1.0)
        walker.update(1.2)
        walker.update(1.0)
        assert walker.progress == pytest.approx(0.2)
        assert walker.going_forward

    def test_ping_pong_long_tick_reflects_several_times(self) -> None:
        walker = create_walker(make_line(), WalkerMode.PING_PONG, 1.0)
        walker.update(5.3)
        assert walker.progress == pytest.approx(0.7)
        assert not walker.going_forward

    def test_ping_pong_long_tick_while_going_backward(self) -> None:
        walker = create_walker(make_line(), WalkerMode.PING_PONG, 1.0)
        walker.update(1.2)
        walker.update(3.0)
        assert walker.progress == pytest.approx(0.2)
        assert walker.going_forward

    def test_ping_pong_huge_elapsed_stays_in_range(self) -> None:
        walker = create_walker(make_line(), WalkerMode.PING_PONG, 1.0)
        walker.update(1e17)
        assert 0.0 <= walker.progress <= 1.0

    def test_no_auto_start_waits(self) -> None:
        walker = create_walker(make_line(), WalkerMode.LOOP, 1.0, auto_start=False)
        walker.update(0.5)
        assert walker.progress == 0.0

    def test_switching_once_to_loop_resumes(self) -> None:
        walker = create_walker(make_line(), WalkerMode.ONCE, 1.0)
        walker.update(2.0)
        assert walker.state == Idle(True)
        walker.mode = WalkerMode.LOOP
        assert walker.state == AutoForward()

    def test_set_progress_clamps(self) -> None:
        walker = create_walker(make_line(), auto_start=False)
        walker.set_progress(1.5)
        assert walker.progress == 1.0
        assert walker.position == pytest.approx((600.0, 0.0))

    def test_reset(self) -> None:
        walker = create_walker(make_line(), WalkerMode.LOOP, 1.0)
        walker.update(0.3)
        walker.reset(ResetLocation.END)
        assert walker.progress == 1.0
        walker.reset()
        assert walker.progress == 0.0
        assert walker.current_trigger_index == 0

    def test_reset_clears_trigger_flags(self) -> None:
        spline = make_line()
        tid = spline.add_trigger("gate", 0.25, 0.05)
        walker = create_walker(spline, WalkerMode.ONCE, 1.0)
        walker.update(0.25)
        assert spline.get_trigger(tid).triggered
        walker.reset()
        assert not spline.get_trigger(tid).triggered
        assert walker.last_trigger_id is None


class TestOrientation:
    def test_rotation_follows_tangent(self) -> None:
        walker = create_walker(make_line(), WalkerMode.ONCE, 1.0)
        walker.update(0.3)
        assert walker.rotation == pytest.approx(math.pi / 2)

    def test_turn_when_walking_backwards(self) -> None:
        walker = create_walker(
            make_line(), WalkerMode.PING_PONG, 1.0, turn_when_walking_backwards=True,
        )
        walker.update(1.2)
        assert walker.rotation == pytest.approx(-math.pi / 2)
        walker.update(1.0)
        assert walker.rotation == pytest.approx(math.pi / 2)

    def test_no_turn_by_default(self) -> None:
        walker = create_walker(make_line(), WalkerMode.PING_PONG, 1.0)
        walker.update(1.2)
        assert walker.rotation == pytest.approx(math.pi / 2)

    def test_disabling_turn_clears_offset(self) -> None:
        walker = create_walker(
            make_line(), WalkerMode.PING_PONG, 1.0, turn_when_walking_backwards=True,
        )
        walker.update(1.2)
        walker.turn_when_walking_backwards = False
        walker.update(0.1)
        assert walker.rotation == pytest.approx(math.pi / 2)

    def test_zero_tangent_keeps_last_orientation(self) -> None:
        spline = BezierSpline([(5.0, 5.0)] * 4)
        walker = create_walker(spline, WalkerMode.LOOP, 1.0)
        walker.update(0.4)
        assert walker.position == pytest.approx((5.0, 5.0))
        assert walker.direction == (0.0, 0.0)
        assert walker.rotation == 0.0

    def test_look_forward_off_freezes_direction(self) -> None:
        spline = BezierSpline([(0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0)])
        walker = create_walker(spline, WalkerMode.ONCE, 1.0, look_forward=False)
        walker.update(0.5)
        assert walker.direction == (0.0, 0.0)
        assert walker.rotation == 0.0


class TestTriggerPolling:
    """Walkers fire one trigger at a time, filtered by direction."""

    def test_two_triggers_in_order(self) -> None:
        spline = make_line()
        spline.add_trigger("late", 0.75, 0.05)
        spline.add_trigger("early", 0.25, 0.05)
        fires: list[tuple[str, bool]] = []
        walker = create_walker(spline, WalkerMode.ONCE, 1.0, on_trigger=record_fires(fires))
        for _ in range(10):
            walker.update(0.1)
        assert [name for name, _ in fires] == ["early", "late"]

    def test_loop_refires_each_lap(self) -> None:
        spline = make_line()
        spline.add_trigger("gate", 0.5, 0.05)
        fires: list[tuple[str, bool]] = []
        walker = create_walker(spline, WalkerMode.LOOP, 1.0, on_trigger=record_fires(fires))
        for _ in range(30):
            walker.update(0.1)
        assert len(fires) == 3

    def test_channel_and_callback_agree(self) -> None:
        spline = make_line()
        spline.add_trigger("gate", 0.5, 0.05)
        heard: list[str] = []
        spline.fired.subscribe(lambda t: heard.append(t.name))
        fires: list[tuple[str, bool]] = []
        walker = create_walker(spline, WalkerMode.LOOP, 1.0, on_trigger=record_fires(fires))
        for _ in range(30):
            walker.update(0.1)
        assert heard == [name for name, _ in fires]

    def test_forward_filter_in_ping_pong(self) -> None:
        spline = make_line()
        spline.add_trigger("gate", 0.5, 0.06)
        fires: list[tuple[str, bool]] = []
        walker = create_walker(spline, WalkerMode.PING_PONG, 1.0, on_trigger=record_fires(fires))
        for _ in range(26):
            walker.update(0.1)
        assert len(fires) == 2
        assert all(forward for _, forward in fires)

    def test_backward_filter_in_ping_pong(self) -> None:
        spline = make_line()
        spline.add_trigger("gate", 0.5, 0.06)
        fires: list[tuple[str, bool]] = []
        walker = create_walker(
            spline, WalkerMode.PING_PONG, 1.0,
            on_trigger=record_fires(fires),
            trigger_direction=TriggerDirection.BACKWARD,
        )
        for _ in range(16):
            walker.update(0.1)
        assert fires == [("gate", False)]

    def test_both_directions_in_ping_pong(self) -> None:
        spline = make_line()
        spline.add_trigger("gate", 0.5, 0.06)
        fires: list[tuple[str, bool]] = []
        walker = create_walker(
            spline, WalkerMode.PING_PONG, 1.0,
            on_trigger=record_fires(fires),
            trigger_direction=TriggerDirection.FORWARD_AND_BACKWARD,
        )
        for _ in range(16):
            walker.update(0.1)
        assert fires == [("gate", True), ("gate", False)]

    def test_once_end_window_fires_once(self) -> None:
        """A trigger covering the end stays fired while the walker parks there."""
        spline = make_line()
        tid = spline.add_trigger("finish", 0.97, 0.05)
        fires: list[tuple[str, bool]] = []
        walker = create_walker(spline, WalkerMode.ONCE, 1.0, on_trigger=record_fires(fires))
        for _ in range(15):
            walker.update(0.1)
        assert fires == [("finish", True)]
        assert walker.progress == 1.0
        assert spline.get_trigger(tid).triggered
        assert walker.last_trigger_id == tid

    def test_events_disabled(self) -> None:
        spline = make_line()
        spline.add_trigger("gate", 0.5, 0.06)
        fires: list[tuple[str, bool]] = []
        walker = create_walker(
            spline, WalkerMode.LOOP, 1.0,
            on_trigger=record_fires(fires), can_trigger_events=False,
        )
        for _ in range(20):
            walker.update(0.1)
        assert fires == []

    def test_no_refire_right_after_fire(self) -> None:
        spline = make_line()
        tid = spline.add_trigger("gate", 0.5, 0.2)
        fires: list[tuple[str, bool]] = []
        walker = create_walker(spline, WalkerMode.ONCE, 1.0, on_trigger=record_fires(fires))
        walker.update(0.4)
        walker.update(0.1)
        walker.update(0.1)
        assert len(fires) == 1
        assert walker.last_trigger_id == tid

    def test_flags_are_shared_between_walkers(self) -> None:
        spline = make_line()
        spline.add_trigger("gate", 0.5, 0.01)
        fast: list[tuple[str, bool]] = []
        slow: list[tuple[str, bool]] = []
        a = create_walker(spline, WalkerMode.ONCE, 1.0, on_trigger=record_fires(fast))
        b = create_walker(spline, WalkerMode.ONCE, 2.0, on_trigger=record_fires(slow))
        for _ in range(2):
            a.update(0.5)
            b.update(0.5)
        assert len(fast) == 1
        assert slow == []


class TestWalkerTriggerAccess:
    def test_add_trigger_keeps_target(self) -> None:
        spline = make_line()
        spline.add_trigger("a", 0.2, 0.06)
        spline.add_trigger("b", 0.8, 0.06)
        walker = create_walker(spline, WalkerMode.ONCE, 1.0)
        walker.update(0.25)
        assert walker.get_trigger_at(walker.current_trigger_index).name == "b"

        walker.add_trigger("behind", 0.1)
        assert walker.get_trigger_at(walker.current_trigger_index).name == "b"

        walker.add_trigger("ahead", 0.5)
        assert walker.get_trigger_at(walker.current_trigger_index).name == "ahead"

    def test_trigger_helpers_delegate(self) -> None:
        spline = make_line()
        walker = create_walker(spline)
        tid = walker.add_trigger("gate", 0.5)
        assert walker.get_trigger(tid) is spline.get_trigger(tid)
        assert walker.get_triggers("gate") == [spline.get_trigger(tid)]
        assert walker.set_trigger_position(tid, 0.25)
        assert spline.get_trigger(tid).progress == 0.25
        assert walker.get_position_on_curve(0.5) == pytest.approx((300.0, 0.0))
