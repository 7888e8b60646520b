"""Delayed, cancellation-free callbacks for validation while typing."""

from __future__ import annotations

from threading import Timer
from typing import Callable, Protocol

Callback = Callable[[], None]


class Scheduler(Protocol):
    def __call__(self, delay_seconds: float, callback: Callback) -> None: ...


def timer_scheduler(delay_seconds: float, callback: Callback) -> None:
    timer = Timer(delay_seconds, callback)
    timer.daemon = True
    timer.start()


class Debouncer:
    """Schedules a callback per key after a quiet period.

    Earlier callbacks are never cancelled: every callback receives only the
    key, so whatever it does must read the live state for that key when it
    finally runs.
    """

    def __init__(self, delay_ms: int, scheduler: Scheduler = timer_scheduler) -> None:
        self.delay_seconds = max(delay_ms, 0) / 1000.0
        self._scheduler = scheduler

    def schedule(self, key: str, action: Callable[[str], None]) -> None:
        self._scheduler(self.delay_seconds, lambda: action(key))
