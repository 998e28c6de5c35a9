"""
Qt signal bridge for the core error handler.
"""

from __future__ import annotations

from PySide6.QtCore import QObject, Signal

from core.error_handler import get_error_handler
from core.errors import BaseAppError


class ErrorSignal(QObject):
    """Re-emits every error handled by the core ErrorHandler as a Qt signal."""

    errorOccurred = Signal(object)  # BaseAppError

    def __init__(self, parent: QObject | None = None):
        super().__init__(parent)
        self._handler = get_error_handler()
        self._handler.subscribe(self._forward)

    def _forward(self, app_error: BaseAppError) -> None:
        self.errorOccurred.emit(app_error)

    def disconnect_handler(self) -> None:
        self._handler.unsubscribe(self._forward)
