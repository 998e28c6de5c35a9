"""
Masked, self-validating line edit.
"""

from __future__ import annotations

from collections.abc import Sequence

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QLineEdit, QWidget

from core.config import KeyboardType
from core.controller import FormController, Validator
from core.field_state import TextFieldState
from core.masking import TextEditValue, TextFormatter
from gui.utils.styling import StyleSheets, apply_error_state
from gui.validation.focus import WidgetFocusHandle
from gui.validation.qt_scheduler import QtScheduler

_INPUT_HINTS = {
    KeyboardType.TEXT: Qt.InputMethodHint.ImhNone,
    KeyboardType.NUMBER: Qt.InputMethodHint.ImhDigitsOnly,
    KeyboardType.PHONE: Qt.InputMethodHint.ImhDialableCharactersOnly,
    KeyboardType.EMAIL: Qt.InputMethodHint.ImhEmailCharactersOnly,
    KeyboardType.DATETIME: Qt.InputMethodHint.ImhDate | Qt.InputMethodHint.ImhTime,
    KeyboardType.URL: Qt.InputMethodHint.ImhUrlCharactersOnly,
}


def input_method_hints(keyboard_type: KeyboardType | None) -> Qt.InputMethodHint:
    """Map a keyboard hint to the Qt input-method hints."""
    if keyboard_type is None:
        return Qt.InputMethodHint.ImhNone
    return _INPUT_HINTS[keyboard_type]


class LineEditEditor:
    """Persistent text handle of an AutoLineEdit, used to apply mask switches."""

    def __init__(self, line_edit: AutoLineEdit):
        self._line_edit = line_edit

    @property
    def text(self) -> str:
        return self._line_edit.text()

    def set_value(self, value: TextEditValue) -> None:
        self._line_edit.apply_value(value)


class AutoLineEdit(QLineEdit):
    """
    QLineEdit driven by a FormController.

    Every user edit goes through the controller's input formatters; with
    several masks the active one is re-selected after each edit. Validation
    errors mark the field through its ``hasError`` property and tooltip.
    """

    # Signals
    errorChanged = Signal(str)  # error message, empty when valid
    valueChanged = Signal(str)

    def __init__(
        self,
        form_controller: FormController | None = None,
        *,
        name: str = "",
        initial_value: str | None = None,
        validator: Validator[str] | None = None,
        input_formatters: Sequence[TextFormatter] | None = None,
        keyboard_type: KeyboardType | None = None,
        autovalidate: bool = False,
        parent: QWidget | None = None,
    ):
        super().__init__(parent)
        self.setObjectName(name)
        self.setStyleSheet(StyleSheets.get_line_edit_style())
        self._formatters_override = list(input_formatters) if input_formatters is not None else None
        self._last_value = TextEditValue()
        self._original_tooltip = ""

        if initial_value:
            super().setText(initial_value)

        self.focus_handle = WidgetFocusHandle(self, name)
        self.state = TextFieldState(
            form_controller,
            name=name,
            focus=self.focus_handle,
            editor=LineEditEditor(self),
            scheduler=QtScheduler(self),
            validator=validator,
            autovalidate=autovalidate,
        )
        self._last_value = TextEditValue.at_end(self.text())
        self.state.add_error_listener(self._on_error_changed)
        self.state.add_listener(self._sync_text)

        hint = keyboard_type or (form_controller.keyboard_type if form_controller else None)
        self.setInputMethodHints(input_method_hints(hint))

        self.textEdited.connect(self._on_text_edited)
        self.cursorPositionChanged.connect(self._on_cursor_moved)

    @property
    def error_text(self) -> str | None:
        return self.state.error_text

    def set_value(self, text: str) -> None:
        """Set the text programmatically, formatting it like typed input."""
        value = self._apply_formatters(self._last_value, TextEditValue.at_end(text))
        self.apply_value(value)

    def apply_value(self, value: TextEditValue) -> None:
        """Show an already formatted value and sync the field state."""
        self._last_value = value
        if value.text != self.text():
            super().setText(value.text)
        self.setCursorPosition(value.cursor)
        state = getattr(self, "state", None)
        if state is not None:
            state.did_change(value.text)
            self.valueChanged.emit(value.text)

    def validate(self) -> bool:
        """Validate this field alone, outside of any form pass."""
        return self.state.validate()

    def dispose(self) -> None:
        self.focus_handle.dispose()
        self.state.dispose()

    def _apply_formatters(self, old_value: TextEditValue, new_value: TextEditValue) -> TextEditValue:
        if self._formatters_override is None:
            return self.state.apply_edit(old_value, new_value)
        value = new_value
        for formatter in self._formatters_override:
            value = formatter.format_edit_update(old_value, value)
        return value

    def _on_text_edited(self, text: str) -> None:
        cursor = self.cursorPosition()
        proposed = TextEditValue(text, cursor, cursor)
        result = self._apply_formatters(self._last_value, proposed)
        self.apply_value(result)

    def _on_cursor_moved(self, old: int, new: int) -> None:
        # Caret and selection moves without an edit, e.g. arrow keys or clicks
        if self.text() != self._last_value.text:
            return
        if self.hasSelectedText():
            start = self.selectionStart()
            self._last_value = TextEditValue(self.text(), start, start + self.selectionLength())
        else:
            self._last_value = TextEditValue(self.text(), new, new)

    def _sync_text(self, value: str | None) -> None:
        # Values pushed by the state itself, e.g. on form reset
        text = value or ""
        if text != self.text():
            self._last_value = TextEditValue.at_end(text)
            super().setText(text)

    def _on_error_changed(self, error_text: str | None) -> None:
        if error_text is not None:
            if not self._original_tooltip and not self.property("hasError"):
                self._original_tooltip = self.toolTip()
            self.setToolTip(f"Error: {error_text}")
        else:
            self.setToolTip(self._original_tooltip)
        apply_error_state(self, error_text)
        self.errorChanged.emit(error_text or "")
