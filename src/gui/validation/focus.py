"""
Qt focus handles for the error-focus coordinator.
"""

from __future__ import annotations

import logging

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QApplication, QWidget

logger = logging.getLogger(__name__)


class WidgetFocusHandle:
    """
    Focus handle backed by a QWidget.

    Requests on a widget that is disabled, refuses focus or has already been
    deleted on the C++ side are ignored.
    """

    def __init__(self, widget: QWidget, name: str = ""):
        self._widget = widget
        self.name = name or widget.objectName()
        self._disposed = False

    @property
    def widget(self) -> QWidget:
        return self._widget

    @property
    def can_request_focus(self) -> bool:
        if self._disposed:
            return False
        try:
            return self._widget.isEnabled() and self._widget.focusPolicy() != Qt.FocusPolicy.NoFocus
        except RuntimeError:
            # Underlying C++ object already deleted
            self._disposed = True
            return False

    def request_focus(self) -> None:
        if not self.can_request_focus:
            return
        try:
            self._widget.setFocus(Qt.FocusReason.OtherFocusReason)
        except RuntimeError:
            logger.warning(f"Focus target {self.name!r} was deleted before it could take focus")
            self._disposed = True

    def unfocus(self) -> None:
        if self._disposed:
            return
        try:
            self._widget.clearFocus()
        except RuntimeError:
            self._disposed = True

    def dispose(self) -> None:
        self._disposed = True

    def __repr__(self) -> str:
        return f"WidgetFocusHandle({self.name!r})"


def clear_application_focus() -> None:
    """Take focus away from whichever widget currently holds it."""
    widget = QApplication.focusWidget()
    if widget is not None:
        widget.clearFocus()
