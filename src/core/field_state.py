"""
Field state: value holder, error slot and change notifier of one field.

Concrete widgets (text input, checkbox, dropdown, date picker) own one of
these and forward user edits to ``did_change``. Validation triggered by the
form reports to the form's focus coordinator; validation triggered by typing
only ever clears a field from it, so focus never jumps while the user types.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Generic, TypeVar

from .config import VALIDATOR_FAILED_MESSAGE
from .controller import FieldController, FormController, Validator
from .error_handler import get_error_handler
from .errors import ConfigError, ErrorCode, create_validation_error
from .focus import ErrorFocusCoordinator, FocusHandle
from .mask_engine import TextEditor
from .masking import TextEditValue, TextFormatter
from .scheduling import Scheduler

if TYPE_CHECKING:
    from .form import Form

T = TypeVar("T")

logger = logging.getLogger(__name__)


class FieldState(Generic[T]):
    """State of a single form field."""

    def __init__(
        self,
        controller: FieldController[T] | None = None,
        *,
        name: str = "",
        initial_value: T | None = None,
        focus: FocusHandle | None = None,
        validator: Validator[T] | None = None,
        autovalidate: bool = False,
    ):
        self.name = name
        self.controller = controller
        self.focus = focus
        self.autovalidate = autovalidate
        self.error_text: str | None = None
        self.coordinator: ErrorFocusCoordinator | None = None
        self.scheduler: Scheduler | None = None
        self._validator = validator
        self._initial_value = initial_value
        self._value = initial_value
        self._listeners: list[Callable[[T | None], None]] = []
        self._error_listeners: list[Callable[[str | None], None]] = []
        self._disposed = False

    @property
    def value(self) -> T | None:
        return self._value

    @property
    def has_error(self) -> bool:
        return self.error_text is not None

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def attach(self, form: Form) -> None:
        """Bind the field to the coordinator and scheduler of a form."""
        self.coordinator = form.coordinator
        if self.scheduler is None:
            self.scheduler = form.scheduler

    def add_listener(self, callback: Callable[[T | None], None]) -> None:
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[T | None], None]) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def add_error_listener(self, callback: Callable[[str | None], None]) -> None:
        """Register a callback invoked whenever the error text changes."""
        self._error_listeners.append(callback)

    def did_change(self, value: T | None) -> None:
        """Store a new value coming from the widget and notify listeners."""
        self._value = value
        for callback in list(self._listeners):
            callback(value)
        if self.autovalidate:
            self._run_validator()
            if self.error_text is None:
                self._discard()

    def validate(self) -> bool:
        """
        Validate as part of a form-wide pass.

        Returns:
            True if the value is valid
        """
        error = self._run_validator()
        if self.coordinator is not None and self.focus is not None:
            self.coordinator.report(self.focus, error)
        return error is None

    def reset(self) -> None:
        """Restore the initial value and clear the error."""
        self._value = self._initial_value
        self.error_text = None
        self._discard()
        self._notify_error()
        for callback in list(self._listeners):
            callback(self._value)

    def dispose(self) -> None:
        if self._disposed:
            return
        self._discard()
        self._listeners.clear()
        self._error_listeners.clear()
        self.coordinator = None
        self._disposed = True

    def _discard(self) -> None:
        if self.coordinator is not None and self.focus is not None:
            self.coordinator.discard(self.focus)

    def _run_validator(self) -> str | None:
        previous = self.error_text
        try:
            if self._validator is not None:
                error = self._validator(self._value)
            elif self.controller is not None:
                error = self.controller.validate(self._value)
            else:
                error = None
        except Exception as e:
            get_error_handler().handle(e, {"field": self.name, "source": "validator"})
            error = VALIDATOR_FAILED_MESSAGE

        self.error_text = error
        if error != previous:
            if error is not None:
                get_error_handler().handle(create_validation_error(self.name, error, self._value))
            self._notify_error()
        return error

    def _notify_error(self) -> None:
        logger.debug(f"Field {self.name!r} error text is now {self.error_text!r}")
        for callback in list(self._error_listeners):
            callback(self.error_text)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class TextFieldState(FieldState[str]):
    """
    Text field with a formatter pipeline.

    ``editor`` is the persistent handle on the displayed text. It is required
    when the controller has several masks, since switching masks rewrites
    the text after the edit that triggered the switch.
    """

    controller: FormController | None

    def __init__(
        self,
        controller: FormController | None = None,
        *,
        name: str = "",
        initial_value: str | None = None,
        focus: FocusHandle | None = None,
        editor: TextEditor | None = None,
        scheduler: Scheduler | None = None,
        validator: Validator[str] | None = None,
        autovalidate: bool = False,
    ):
        if controller is not None and controller.requires_editor and editor is None:
            raise ConfigError(
                code=ErrorCode.EDITOR_MISSING,
                user_message="A text editor must be set when using multiple masks",
                context={"field": name, "masks": [str(m) for m in controller.masks]},
            )

        if controller is not None and initial_value:
            initial_value = controller.format_value(initial_value)

        super().__init__(
            controller,
            name=name,
            initial_value=initial_value,
            focus=focus,
            validator=validator,
            autovalidate=autovalidate,
        )
        self.editor = editor
        self.scheduler = scheduler

        if editor is not None and controller is not None and editor.text:
            formatted = controller.format_value(editor.text)
            editor.set_value(TextEditValue.at_end(formatted))
            self._value = self._initial_value = formatted
        elif editor is not None and editor.text:
            self._value = self._initial_value = editor.text

    @property
    def input_formatters(self) -> list[TextFormatter]:
        if self.controller is None:
            return []
        return self.controller.input_formatters()

    def apply_edit(self, old_value: TextEditValue, new_value: TextEditValue) -> TextEditValue:
        """Run a proposed edit through every input formatter, in order."""
        value = new_value
        for formatter in self.input_formatters:
            value = formatter.format_edit_update(old_value, value)
        return value

    def did_change(self, value: str | None) -> None:
        super().did_change(value)
        if self.controller is None or not self.controller.requires_editor:
            return
        if self.editor is None:
            raise ConfigError(
                code=ErrorCode.EDITOR_MISSING,
                user_message="A text editor must be set when using multiple masks",
                context={"field": self.name},
            )
        if self.scheduler is None:
            raise ConfigError(
                code=ErrorCode.CONFIG_INVALID,
                user_message="A scheduler is required to switch masks",
                context={"field": self.name},
            )
        self.controller.helper.update_mask(value or "", self.editor, self.scheduler)

    def reset(self) -> None:
        # Re-select the pattern fitting the initial value
        if self.controller is not None:
            self.controller.format_value(self._initial_value or "")
        super().reset()

    def dispose(self) -> None:
        if self.controller is not None:
            self.controller.release()
        super().dispose()
