"""Curve, control point, trigger and walker rendering."""
from __future__ import annotations

import math

import pygame

from tick_spline import BezierSpline, ControlPointSet, SplineWalker
from ui.constants import (
    CURVE_COLOR,
    CURVE_STEPS,
    HANDLE_LINE,
    LABEL_COLOR,
    MODE_COLORS,
    POINT_RADIUS,
    SCREEN_H,
    SCREEN_W,
    SIDEBAR_BG,
    SIDEBAR_W,
    STATUS_BG,
    STATUS_H,
    TEXT_COLOR,
    TEXT_DIM,
    TRIGGER_FIRED,
    TRIGGER_IDLE,
    WALKER_COLOR,
    WALKER_SIZE,
)


def draw_spline(surface: pygame.Surface, spline: BezierSpline, selected: int | None) -> None:
    """Draw the curve, handle lines and control points."""
    samples = [spline.get_point(i / CURVE_STEPS) for i in range(CURVE_STEPS + 1)]
    pygame.draw.lines(surface, CURVE_COLOR, False, samples, 2)

    points = spline.get_all_points()
    for i in range(0, len(points) - 1, 3):
        pygame.draw.line(surface, HANDLE_LINE, points[i], points[i + 1])
        pygame.draw.line(surface, HANDLE_LINE, points[i + 2], points[i + 3])

    for i, p in enumerate(points):
        if ControlPointSet.is_anchor(i):
            color = MODE_COLORS[spline.get_control_point_mode(i).name]
            radius = POINT_RADIUS + 2
        else:
            color = TEXT_DIM
            radius = POINT_RADIUS
        pygame.draw.circle(surface, color, (int(p[0]), int(p[1])), radius)
        if i == selected:
            pygame.draw.circle(surface, TEXT_COLOR, (int(p[0]), int(p[1])), radius + 4, 1)


def draw_triggers(surface: pygame.Surface, spline: BezierSpline, font: pygame.font.Font) -> None:
    for trigger in spline.sorted_triggers():
        x, y = spline.get_point(trigger.progress)
        color = TRIGGER_FIRED if trigger.triggered else TRIGGER_IDLE
        pygame.draw.rect(surface, color, (int(x) - 4, int(y) - 4, 8, 8), 1)
        surface.blit(font.render(trigger.name, True, color), (int(x) + 8, int(y) - 18))


def draw_walker(surface: pygame.Surface, walker: SplineWalker) -> None:
    """Draw the walker as a triangle pointing along its rotation."""
    x, y = walker.position
    # rotation 0 points up the screen
    angle = walker.rotation
    tip = (x + math.sin(angle) * WALKER_SIZE, y - math.cos(angle) * WALKER_SIZE)
    left = (x + math.sin(angle - 2.5) * WALKER_SIZE * 0.7, y - math.cos(angle - 2.5) * WALKER_SIZE * 0.7)
    right = (x + math.sin(angle + 2.5) * WALKER_SIZE * 0.7, y - math.cos(angle + 2.5) * WALKER_SIZE * 0.7)
    pygame.draw.polygon(surface, WALKER_COLOR, [tip, left, right])


def draw_sidebar(
    surface: pygame.Surface,
    font: pygame.font.Font,
    walker: SplineWalker,
    fired_log: list[str],
) -> None:
    """Draw right-side info panel."""
    x = SCREEN_W - SIDEBAR_W
    h = SCREEN_H - STATUS_H
    pygame.draw.rect(surface, SIDEBAR_BG, (x, 0, SIDEBAR_W, h))
    pygame.draw.line(surface, (50, 50, 70), (x, 0), (x, h))

    pad = 10
    line_h = 22
    cx = x + pad
    cy = 8

    surface.blit(font.render("WALKER", True, LABEL_COLOR), (cx, cy))
    cy += line_h + 4
    lines = [
        f"Mode: {walker.mode.name}",
        f"Input: {walker.input_mode.name}",
        f"Step: {walker.trigger_mode.name}",
        f"Dir: {'fwd' if walker.going_forward else 'back'}",
        f"Progress: {walker.progress:.3f}",
        f"Duration: {walker.duration:.1f}s",
        f"Turn: {'on' if walker.turn_when_walking_backwards else 'off'}",
    ]
    for text in lines:
        surface.blit(font.render(text, True, TEXT_COLOR), (cx, cy))
        cy += line_h

    cy += 8
    surface.blit(font.render("FIRED", True, LABEL_COLOR), (cx, cy))
    cy += line_h
    for name in fired_log[-8:]:
        surface.blit(font.render(name, True, TEXT_DIM), (cx, cy))
        cy += line_h


def draw_status_bar(surface: pygame.Surface, font: pygame.font.Font) -> None:
    y = SCREEN_H - STATUS_H
    pygame.draw.rect(surface, STATUS_BG, (0, y, SCREEN_W, STATUS_H))
    hint = "Drag points | M mode | Tab walker mode | I input | A/D walk | N/B segment | T turn | R reset | Esc"
    surface.blit(font.render(hint, True, TEXT_DIM), (10, y + 10))
