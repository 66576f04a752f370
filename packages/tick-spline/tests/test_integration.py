"""End-to-end scenarios: a spline, its triggers and walkers driven tick by tick."""
from __future__ import annotations

import pytest

from tick_spline import (
    BezierSpline,
    ControlPointMode,
    Trigger,
    TriggerDirection,
    WalkerMode,
    create_walker,
)


def test_single_fire_on_open_spline() -> None:
    """Two segments, one trigger at the middle, one long tick lands on it."""
    spline = BezierSpline()
    spline.add_segment()
    tid = spline.add_trigger("checkpoint", 0.5, 0.05)

    heard: list[Trigger] = []
    spline.fired.subscribe(heard.append)
    walker = create_walker(spline, WalkerMode.ONCE, 10.0)

    walker.update(5.0)
    assert walker.progress == 0.5
    assert [t.id for t in heard] == [tid]
    assert spline.get_trigger(tid).triggered

    walker.update(0.1)
    assert len(heard) == 1

    walker.update(10.0)
    assert walker.progress == 1.0
    assert len(heard) == 1


def test_patrol_route_round_trip() -> None:
    """A guard patrols a closed route; each checkpoint is logged once per lap."""
    spline = BezierSpline(
        [(0.0, 0.0), (50.0, -50.0), (150.0, -50.0), (200.0, 0.0),
         (250.0, 50.0), (-50.0, 50.0)],
        loop=True,
    )
    spline.set_control_point_mode(3, ControlPointMode.MIRRORED)
    for name, progress in (("gate", 0.1), ("tower", 0.45), ("yard", 0.8)):
        spline.add_trigger(name, progress, 0.03)

    log: list[str] = []
    walker = create_walker(
        spline, WalkerMode.LOOP, 5.0,
        on_trigger=lambda w, t: log.append(t.name),
    )
    for _ in range(200):
        walker.update(0.05)

    # 200 ticks of 0.05s over a 5s lap is two full laps
    assert log == ["gate", "tower", "yard"] * 2
    assert walker.position == pytest.approx(spline.get_point(walker.progress))


def test_restored_spline_drives_a_walker() -> None:
    spline = BezierSpline()
    spline.add_segment()
    spline.add_trigger("end", 1.0, 0.0)
    restored = BezierSpline.restore(spline.snapshot())

    fired: list[str] = []
    walker = create_walker(
        restored, WalkerMode.PING_PONG, 1.0,
        trigger_direction=TriggerDirection.FORWARD_AND_BACKWARD,
        on_trigger=lambda w, t: fired.append(t.name),
    )
    walker.update(0.5)
    walker.update(0.5)
    assert walker.progress == 1.0
    assert fired == ["end"]
