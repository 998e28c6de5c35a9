"""
Forms: ordered collections of fields sharing one focus coordinator.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

from .config import FOCUS_COOLDOWN_MS
from .field_state import FieldState
from .focus import ErrorFocusCoordinator
from .scheduling import Scheduler

logger = logging.getLogger(__name__)


class Form:
    """
    A set of fields validated together.

    The form owns the error-focus coordinator of its fields; disposing the
    form tears both down. Fields should be added in layout order, which is
    the order focus falls back on.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        clear_focus: Callable[[], None] | None = None,
        cooldown_ms: int = FOCUS_COOLDOWN_MS,
        name: str = "",
    ):
        self.name = name
        self.scheduler = scheduler
        self.coordinator = ErrorFocusCoordinator(scheduler, clear_focus=clear_focus, cooldown_ms=cooldown_ms)
        self._fields: list[FieldState[Any]] = []

    @property
    def fields(self) -> list[FieldState[Any]]:
        return list(self._fields)

    def add_field(self, field: FieldState[Any]) -> FieldState[Any]:
        """Register a field; returns it for chaining."""
        if field not in self._fields:
            field.attach(self)
            self._fields.append(field)
        return field

    def remove_field(self, field: FieldState[Any]) -> None:
        if field in self._fields:
            self._fields.remove(field)
            field.dispose()

    def get_field(self, name: str) -> FieldState[Any] | None:
        for field in self._fields:
            if field.name == name:
                return field
        return None

    def validate(self) -> bool:
        """
        Validate every field synchronously.

        Every field is validated even after a failure so each one shows its
        error; focus moves to the first failing field afterwards.

        Returns:
            True if all fields are valid
        """
        results = [field.validate() for field in self._fields]
        valid = all(results)
        logger.debug(f"Form {self.name!r} validated: {results.count(False)} invalid field(s)")
        return valid

    def errors(self) -> dict[str, str]:
        """Current error text of every failing field, by field name."""
        return {field.name: field.error_text for field in self._fields if field.error_text is not None}

    def values(self) -> dict[str, Any]:
        return {field.name: field.value for field in self._fields}

    def reset(self) -> None:
        for field in self._fields:
            field.reset()

    def dispose(self) -> None:
        for field in self._fields:
            field.dispose()
        self._fields.clear()
        self.coordinator.dispose()

    def __enter__(self) -> Form:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.dispose()


class FormGroup:
    """Several forms validated in order, such as the pages of a tabbed dialog."""

    def __init__(self, forms: Sequence[Form]):
        self.forms = list(forms)

    def validate_until(self, index: int) -> int | None:
        """
        Validate the forms before ``index``, stopping at the first invalid one.

        Returns:
            Index of the first invalid form, or None if all are valid
        """
        for i, form in enumerate(self.forms[:index]):
            if not form.validate():
                logger.debug(f"Form group stopped at invalid form {i}")
                return i
        return None

    def validate_all(self) -> int | None:
        return self.validate_until(len(self.forms))
