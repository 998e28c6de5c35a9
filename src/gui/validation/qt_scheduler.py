"""
QTimer-backed implementation of the core scheduling contract.
"""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import QObject, QTimer


class QtTimerHandle:
    """Single-shot QTimer wrapping one scheduled callback."""

    def __init__(self, delay_ms: int, callback: Callable[[], None], on_done: Callable[[QtTimerHandle], None]):
        self._callback = callback
        self._on_done = on_done
        self.timer = QTimer()
        self.timer.setSingleShot(True)
        self.timer.timeout.connect(self._fire)
        self.timer.start(max(0, delay_ms))

    def cancel(self) -> None:
        self.timer.stop()
        self._on_done(self)

    def is_active(self) -> bool:
        return self.timer.isActive()

    def _fire(self) -> None:
        self._on_done(self)
        self._callback()


class QtScheduler(QObject):
    """
    Schedules callbacks on the Qt event loop.

    Zero-delay timers fire once control returns to the event loop, after the
    events already queued, which places both ``call_soon`` and
    ``call_after_frame`` after the edit or validation pass in progress.
    """

    def __init__(self, parent: QObject | None = None):
        super().__init__(parent)
        self._handles: set[QtTimerHandle] = set()

    def call_soon(self, callback: Callable[[], None]) -> QtTimerHandle:
        return self._start(0, callback)

    def call_after_frame(self, callback: Callable[[], None]) -> QtTimerHandle:
        return self._start(0, callback)

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> QtTimerHandle:
        return self._start(delay_ms, callback)

    def pending(self) -> int:
        return sum(1 for handle in self._handles if handle.is_active())

    def cancel_all(self) -> None:
        for handle in list(self._handles):
            handle.cancel()

    def _start(self, delay_ms: int, callback: Callable[[], None]) -> QtTimerHandle:
        # Handles are kept alive here until they fire or are cancelled.
        handle = QtTimerHandle(delay_ms, callback, self._handles.discard)
        self._handles.add(handle)
        return handle
