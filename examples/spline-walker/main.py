"""Spline Walker - Interactive Bézier path and walker visualizer.

Exercises tick-spline: control point editing, triggers and every walker mode.

Controls:
  Drag    Move a control point (anchors carry their handles)
  M       Cycle the selected anchor's mode (free / aligned / mirrored)
  Tab     Cycle walker mode (once / loop / ping-pong)
  I       Cycle input (autoplay / held keys / trigger-by-trigger)
  A/D     Walk backward / forward when input is active
  N/B     Add segment at the end / remove it
  L       Toggle loop
  T       Toggle turning when walking backwards
  +/-     Adjust walker duration
  R       Reset walker to the start
  Esc     Quit
"""
from __future__ import annotations

import logging
import sys

import pygame

from tick_spline import (
    BezierSpline,
    Direction,
    InputMode,
    SplineWalker,
    Trigger,
    TriggerDirection,
    TriggerMode,
    WalkerMode,
    create_walker,
)
from ui.constants import BG_COLOR, FPS, PICK_RADIUS, SCREEN_H, SCREEN_W, TPS
from ui.draw import draw_sidebar, draw_spline, draw_status_bar, draw_triggers, draw_walker

logger = logging.getLogger(__name__)

WALKER_MODES = [WalkerMode.ONCE, WalkerMode.LOOP, WalkerMode.PING_PONG]


def held_key(key: int) -> bool:
    return bool(pygame.key.get_pressed()[key])


class DemoState:
    """Holds the spline, its walker and the editor selection."""

    def __init__(self) -> None:
        self.spline = BezierSpline(
            [
                (120.0, 300.0), (160.0, 120.0), (320.0, 120.0),
                (360.0, 300.0), (400.0, 480.0), (560.0, 480.0),
                (600.0, 300.0),
            ]
        )
        for name, progress in (("gate", 0.2), ("bridge", 0.5), ("tower", 0.85)):
            self.spline.add_trigger(name, progress, 0.01)

        self.fired_log: list[str] = []
        self.selected: int | None = None
        self.dragging = False
        self.input_step = 0
        self.walker = create_walker(
            self.spline,
            WalkerMode.LOOP,
            6.0,
            on_trigger=self._on_trigger,
            trigger_direction=TriggerDirection.FORWARD_AND_BACKWARD,
        )

    def _on_trigger(self, walker: SplineWalker, trigger: Trigger) -> None:
        arrow = ">" if walker.going_forward else "<"
        self.fired_log.append(f"{arrow} {trigger.name}")

    def cycle_mode(self) -> None:
        i = WALKER_MODES.index(self.walker.mode)
        self.walker.mode = WALKER_MODES[(i + 1) % len(WALKER_MODES)]
        logger.info("Walker mode: %s", self.walker.mode.name)

    def cycle_input(self) -> None:
        """Autoplay -> held keys -> trigger-by-trigger -> autoplay."""
        self.input_step = (self.input_step + 1) % 3
        if self.input_step == 0:
            self.walker.reset_input()
        else:
            mode = TriggerMode.DYNAMIC if self.input_step == 1 else TriggerMode.TRIGGER_BY_TRIGGER
            self.walker.set_input(pygame.K_d, pygame.K_a, held_key, mode, InputMode.KEYBOARD)
        logger.info("Walker input: %s / %s", self.walker.input_mode.name, self.walker.trigger_mode.name)

    def cycle_point_mode(self) -> None:
        if self.selected is None:
            return
        mode = self.spline.get_control_point_mode(self.selected)
        self.spline.set_control_point_mode(self.selected, mode.next())

    def pick(self, pos: tuple[int, int]) -> None:
        self.selected = self.spline.find_point_near(pos, PICK_RADIUS)
        self.dragging = self.selected is not None

    def drag(self, pos: tuple[int, int]) -> None:
        if self.dragging and self.selected is not None:
            self.spline.set_control_point(self.selected, pos)

    def grow(self) -> None:
        self.spline.add_segment(Direction.FORWARD)

    def shrink(self) -> None:
        if self.spline.segment_count > 1:
            self.spline.remove_segment(Direction.FORWARD)
            self.selected = None


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    pygame.init()
    screen = pygame.display.set_mode((SCREEN_W, SCREEN_H))
    pygame.display.set_caption("Spline Walker - tick-spline demo")
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("monospace", 13)

    state = DemoState()

    tick_interval = 1.0 / TPS
    accumulator = 0.0
    running = True

    while running:
        dt = clock.tick(FPS) / 1000.0
        accumulator += dt

        # --- Events ---
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_TAB:
                    state.cycle_mode()
                elif event.key == pygame.K_i:
                    state.cycle_input()
                elif event.key == pygame.K_m:
                    state.cycle_point_mode()
                elif event.key == pygame.K_n:
                    state.grow()
                elif event.key == pygame.K_b:
                    state.shrink()
                elif event.key == pygame.K_l:
                    state.spline.loop = not state.spline.loop
                elif event.key == pygame.K_t:
                    walker = state.walker
                    walker.turn_when_walking_backwards = not walker.turn_when_walking_backwards
                elif event.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
                    state.walker.duration = min(state.walker.duration + 1.0, 20.0)
                elif event.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
                    state.walker.duration = max(state.walker.duration - 1.0, 1.0)
                elif event.key == pygame.K_r:
                    state.walker.reset()
                    state.fired_log.clear()

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                state.pick(event.pos)
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                state.dragging = False
            elif event.type == pygame.MOUSEMOTION:
                state.drag(event.pos)

        # --- Tick ---
        while accumulator >= tick_interval:
            state.walker.update(tick_interval)
            accumulator -= tick_interval

        # --- Render ---
        screen.fill(BG_COLOR)
        draw_spline(screen, state.spline, state.selected)
        draw_triggers(screen, state.spline, font)
        draw_walker(screen, state.walker)
        draw_sidebar(screen, font, state.walker, state.fired_log)
        draw_status_bar(screen, font)

        pygame.display.flip()

    pygame.quit()
    sys.exit()


if __name__ == "__main__":
    main()
