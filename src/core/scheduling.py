"""
Scheduling primitives used by the mask engine and the focus coordinator.

Everything runs on a single event loop. ``call_soon`` runs after the current
task returns, ``call_after_frame`` after the loop has processed the pending
events of the current pass, and ``call_later`` after a delay. The Qt
implementation lives in ``gui.validation.qt_scheduler``; ``ManualScheduler``
drives the same contract by hand for headless use.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol


class TimerHandle(Protocol):
    """A scheduled callback that can be cancelled before it fires."""

    def cancel(self) -> None: ...

    def is_active(self) -> bool: ...


class Scheduler(Protocol):
    """Event-loop scheduling contract."""

    def call_soon(self, callback: Callable[[], None]) -> TimerHandle: ...

    def call_after_frame(self, callback: Callable[[], None]) -> TimerHandle: ...

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle: ...


class ManualHandle:
    """Handle returned by ``ManualScheduler``."""

    def __init__(self, due: int, order: int, callback: Callable[[], None]):
        self.due = due
        self.order = order
        self.callback = callback
        self._active = True

    def cancel(self) -> None:
        self._active = False

    def is_active(self) -> bool:
        return self._active

    def fire(self) -> None:
        if self._active:
            self._active = False
            self.callback()


class ManualScheduler:
    """
    Scheduler driven explicitly by the caller.

    ``call_soon`` and ``call_after_frame`` callbacks are due at the current
    time; ``call_later`` callbacks become due once ``advance`` moved the
    clock far enough. Callbacks run in due-time then scheduling order.
    """

    def __init__(self) -> None:
        self._now = 0
        self._counter = 0
        self._queue: list[ManualHandle] = []

    @property
    def now(self) -> int:
        return self._now

    def call_soon(self, callback: Callable[[], None]) -> ManualHandle:
        return self._schedule(0, callback)

    def call_after_frame(self, callback: Callable[[], None]) -> ManualHandle:
        return self._schedule(0, callback)

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ManualHandle:
        return self._schedule(max(0, delay_ms), callback)

    def pending(self) -> int:
        """Number of callbacks still waiting to fire."""
        return sum(1 for handle in self._queue if handle.is_active())

    def run_pending(self) -> int:
        """
        Run every callback due at the current time, including ones scheduled
        while running.

        Returns:
            Number of callbacks executed
        """
        executed = 0
        while True:
            due = [h for h in self._queue if h.is_active() and h.due <= self._now]
            if not due:
                break
            handle = min(due, key=lambda h: (h.due, h.order))
            self._queue.remove(handle)
            handle.fire()
            executed += 1
        self._queue = [h for h in self._queue if h.is_active()]
        return executed

    def advance(self, delay_ms: int) -> int:
        """
        Move the clock forward, firing callbacks as their due time passes.

        Returns:
            Number of callbacks executed
        """
        target = self._now + delay_ms
        executed = self.run_pending()
        while True:
            upcoming = [h for h in self._queue if h.is_active() and h.due <= target]
            if not upcoming:
                break
            self._now = min(h.due for h in upcoming)
            executed += self.run_pending()
        self._now = target
        return executed + self.run_pending()

    def _schedule(self, delay_ms: int, callback: Callable[[], None]) -> ManualHandle:
        self._counter += 1
        handle = ManualHandle(self._now + delay_ms, self._counter, callback)
        self._queue.append(handle)
        return handle
