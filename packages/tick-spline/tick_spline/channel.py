"""Synchronous fan-out channel for trigger-fired events."""
from __future__ import annotations

from typing import Callable

from tick_spline.trigger import Trigger

TriggerHandler = Callable[[Trigger], None]


class TriggerChannel:
    """Handlers run in registration order, before ``emit`` returns."""

    def __init__(self) -> None:
        self._handlers: list[TriggerHandler] = []

    def __len__(self) -> int:
        return len(self._handlers)

    def subscribe(self, handler: TriggerHandler) -> None:
        self._handlers.append(handler)

    def unsubscribe(self, handler: TriggerHandler) -> None:
        try:
            self._handlers.remove(handler)
        except ValueError:
            pass

    def emit(self, trigger: Trigger) -> None:
        for handler in list(self._handlers):
            handler(trigger)

    def clear(self) -> None:
        self._handlers.clear()
