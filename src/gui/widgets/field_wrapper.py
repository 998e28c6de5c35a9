"""
Validation wrapper for arbitrary value widgets.

``AutoFieldWrapper`` places any widget above an error message and gives it a
``FieldState``. The concrete wrappers below connect the change signal of a
checkbox, combo box or date edit to ``did_change``; any other widget can be
wrapped directly, with the caller calling ``did_change`` itself.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from typing import Any

from PySide6.QtCore import QDate
from PySide6.QtWidgets import QCheckBox, QComboBox, QDateEdit, QLabel, QVBoxLayout, QWidget

from core.controller import FieldController, Validator
from core.field_state import FieldState
from gui.utils.styling import StyleSheets
from gui.validation.focus import WidgetFocusHandle


class AutoFieldWrapper(QWidget):
    """
    Any widget plus an error message shown below it.

    Values pushed by the state, e.g. on form reset, reach the widget through
    ``setter``. Subclasses that know their widget override ``_sync_widget``
    instead; without either, the widget keeps showing its own value.

    Example:
        checkbox = QCheckBox("I accept the terms")
        wrapper = AutoFieldWrapper(
            checkbox,
            validator=lambda checked: None if checked else "You must accept",
            setter=lambda checked: checkbox.setChecked(bool(checked)),
        )
        checkbox.toggled.connect(wrapper.did_change)
    """

    def __init__(
        self,
        widget: QWidget,
        controller: FieldController[Any] | None = None,
        *,
        name: str = "",
        initial_value: Any = None,
        validator: Validator[Any] | None = None,
        autovalidate: bool = False,
        error_widget: Callable[[str], QWidget] | None = None,
        setter: Callable[[Any], None] | None = None,
        parent: QWidget | None = None,
    ):
        super().__init__(parent)
        self.setObjectName(name)
        self.widget = widget
        self._error_widget_factory = error_widget
        self._setter = setter
        self._custom_error_widget: QWidget | None = None

        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self._layout.setSpacing(0)
        self._layout.addWidget(widget)

        self.error_label = QLabel()
        self.error_label.setObjectName("fieldErrorLabel")
        self.error_label.setStyleSheet(StyleSheets.get_error_label_style())
        self.error_label.setWordWrap(True)
        self.error_label.hide()
        self._layout.addWidget(self.error_label)

        self.focus_handle = WidgetFocusHandle(widget, name)
        self.state: FieldState[Any] = FieldState(
            controller,
            name=name,
            initial_value=initial_value,
            focus=self.focus_handle,
            validator=validator,
            autovalidate=autovalidate,
        )
        self.state.add_error_listener(self._show_error)
        self.state.add_listener(self._sync_widget)

    @property
    def value(self) -> Any:
        return self.state.value

    @property
    def error_text(self) -> str | None:
        return self.state.error_text

    def did_change(self, value: Any) -> None:
        """Forward a value change from the wrapped widget."""
        self.state.did_change(value)

    def validate(self) -> bool:
        return self.state.validate()

    def dispose(self) -> None:
        self.focus_handle.dispose()
        self.state.dispose()

    def _sync_widget(self, value: Any) -> None:
        """Show a value pushed by the state, e.g. on form reset."""
        if self._setter is None:
            return
        self.widget.blockSignals(True)
        try:
            self._setter(value)
        finally:
            self.widget.blockSignals(False)

    def _show_error(self, error_text: str | None) -> None:
        if self._custom_error_widget is not None:
            self._layout.removeWidget(self._custom_error_widget)
            self._custom_error_widget.deleteLater()
            self._custom_error_widget = None

        if error_text is None:
            self.error_label.clear()
            self.error_label.hide()
            return

        if self._error_widget_factory is not None:
            self._custom_error_widget = self._error_widget_factory(error_text)
            self._layout.addWidget(self._custom_error_widget)
            return

        self.error_label.setText(error_text)
        self.error_label.show()


class CheckBoxField(AutoFieldWrapper):
    """Wrapped QCheckBox; the value is its checked state."""

    def __init__(self, text: str = "", controller: FieldController[bool] | None = None, **kwargs: Any):
        checkbox = QCheckBox(text)
        checkbox.setChecked(bool(kwargs.get("initial_value")))
        super().__init__(checkbox, controller, **kwargs)
        self.checkbox = checkbox
        checkbox.toggled.connect(self.did_change)

    def _sync_widget(self, value: Any) -> None:
        self.checkbox.blockSignals(True)
        self.checkbox.setChecked(bool(value))
        self.checkbox.blockSignals(False)


class ComboBoxField(AutoFieldWrapper):
    """
    Wrapped QComboBox; the value is the item data of the current entry, or
    None while nothing is selected.
    """

    def __init__(
        self,
        items: list[tuple[str, Any]],
        controller: FieldController[Any] | None = None,
        **kwargs: Any,
    ):
        combo = QComboBox()
        for label, data in items:
            combo.addItem(label, data)
        combo.setCurrentIndex(-1)

        initial = kwargs.get("initial_value")
        if initial is not None:
            combo.setCurrentIndex(combo.findData(initial))

        super().__init__(combo, controller, **kwargs)
        self.combo = combo
        combo.currentIndexChanged.connect(self._on_index_changed)

    def _on_index_changed(self, index: int) -> None:
        self.did_change(self.combo.itemData(index) if index >= 0 else None)

    def _sync_widget(self, value: Any) -> None:
        self.combo.blockSignals(True)
        self.combo.setCurrentIndex(-1 if value is None else self.combo.findData(value))
        self.combo.blockSignals(False)


class DateField(AutoFieldWrapper):
    """Wrapped QDateEdit; the value is a ``datetime.date``."""

    def __init__(self, controller: FieldController[date] | None = None, **kwargs: Any):
        date_edit = QDateEdit()
        date_edit.setCalendarPopup(True)
        initial = kwargs.get("initial_value")
        if initial is not None:
            date_edit.setDate(QDate(initial.year, initial.month, initial.day))

        super().__init__(date_edit, controller, **kwargs)
        self.date_edit = date_edit
        date_edit.dateChanged.connect(self._on_date_changed)

    def _on_date_changed(self, value: QDate) -> None:
        self.did_change(value.toPython())

    def _sync_widget(self, value: Any) -> None:
        if value is None:
            return
        self.date_edit.blockSignals(True)
        self.date_edit.setDate(QDate(value.year, value.month, value.day))
        self.date_edit.blockSignals(False)
