"""
Qt form tying AutoForm widgets to a shared error-focus coordinator.

This module wires the framework-free ``core.form.Form`` to the Qt event loop:
scheduling runs on QTimer, focus moves through the widgets, and field
validity is reported through signals.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from PySide6.QtCore import QObject, Signal

from core.config import FOCUS_COOLDOWN_MS
from core.field_state import FieldState
from core.focus import ErrorFocusCoordinator
from core.form import Form

from .focus import clear_application_focus
from .qt_scheduler import QtScheduler


class FormField(Protocol):
    """Widget exposing a field state: AutoLineEdit or an AutoFieldWrapper."""

    state: FieldState[Any]

    def dispose(self) -> None: ...


class AutoForm(QObject):
    """
    Validates a group of field widgets together.

    Calling ``validate`` runs every field's validator synchronously; once the
    pass is over, keyboard focus moves to the first failing field in
    registration order.
    """

    # Signals
    fieldValidityChanged = Signal(str, bool, str)  # name, valid, message
    validationFinished = Signal(bool)  # overall_valid

    def __init__(self, parent: QObject | None = None, cooldown_ms: int = FOCUS_COOLDOWN_MS, name: str = ""):
        super().__init__(parent)
        self._logger = logging.getLogger(__name__)
        self.scheduler = QtScheduler(self)
        self.form = Form(self.scheduler, clear_focus=clear_application_focus, cooldown_ms=cooldown_ms, name=name)
        self._widgets: dict[str, FormField] = {}

    @property
    def coordinator(self) -> ErrorFocusCoordinator:
        return self.form.coordinator

    def register(self, widget: FormField) -> FormField:
        """
        Register a field widget; fields should be registered in layout order.

        Args:
            widget: The field widget to validate with this form

        Returns:
            The widget, for chaining
        """
        state = widget.state
        key = state.name or f"field_{len(self._widgets)}"
        if key in self._widgets:
            self._logger.warning(f"Replacing field already registered as {key!r}")
            self.unregister(key)

        self._widgets[key] = widget
        self.form.add_field(state)
        state.add_error_listener(lambda error: self.fieldValidityChanged.emit(key, error is None, error or ""))
        return widget

    def unregister(self, key: str) -> None:
        """Remove a field and dispose of its state."""
        widget = self._widgets.pop(key, None)
        if widget is None:
            return
        self.form.remove_field(widget.state)
        widget.dispose()

    def field(self, key: str) -> FormField | None:
        return self._widgets.get(key)

    def validate(self) -> bool:
        """
        Validate all registered fields immediately.

        Returns:
            True if all fields are valid, False otherwise
        """
        valid = self.form.validate()
        self.validationFinished.emit(valid)
        return valid

    def is_field_valid(self, key: str) -> bool:
        widget = self._widgets.get(key)
        return widget is None or widget.state.error_text is None

    def get_field_error(self, key: str) -> str:
        """
        Get the error message for a specific field.

        Returns:
            Error message or empty string if valid
        """
        widget = self._widgets.get(key)
        if widget is None or widget.state.error_text is None:
            return ""
        return widget.state.error_text

    def errors(self) -> dict[str, str]:
        return self.form.errors()

    def values(self) -> dict[str, Any]:
        return self.form.values()

    def reset(self) -> None:
        self.form.reset()

    def cleanup(self) -> None:
        """Dispose of every field and cancel pending timers."""
        for widget in self._widgets.values():
            widget.dispose()
        self._widgets.clear()
        self.form.dispose()
        self.scheduler.cancel_all()
