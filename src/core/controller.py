"""
Field controllers: the validation and formatting strategy of a field.

A controller is injected into a field state and decides what the field
accepts. ``FieldController`` only validates and fits any kind of value
(checkbox, dropdown, date). ``FormController`` adds the text pipeline:
allowed characters, mask candidates and a keyboard hint.

Example:
    phone = FormController(
        validator=lambda value: None if value else "This field is required",
        masks=["(##) ####-####", "(##) #####-####"],
        keyboard_type=KeyboardType.NUMBER,
    )
    phone.format_value("1122334455")  # "(11) 2233-4455"
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from typing import Generic, TypeVar

from .config import DEFAULT_ALLOWED_PATTERN, KeyboardType
from .mask_engine import MaskEngine
from .masking import MaskPattern, TextFormatter

T = TypeVar("T")

Validator = Callable[[T | None], str | None]


class FieldController(Generic[T]):
    """Validation strategy for a field holding values of type T."""

    def __init__(self, validator: Validator[T] | None = None):
        self.validator = validator

    def validate(self, value: T | None) -> str | None:
        """
        Run the validator.

        Returns:
            The error message to display, or None when the value is valid
        """
        if self.validator is None:
            return None
        return self.validator(value)


class FormController(FieldController[str]):
    """
    Validation and input formatting for a text field.

    One controller drives one field: its mask state is created on first use
    and released when the field is disposed.
    """

    def __init__(
        self,
        validator: Validator[str] | None = None,
        allowed_pattern: re.Pattern[str] | str = DEFAULT_ALLOWED_PATTERN,
        masks: Sequence[str | MaskPattern] = (),
        keyboard_type: KeyboardType | None = None,
        custom_formatters: Sequence[TextFormatter] | None = None,
    ):
        super().__init__(validator)
        self.allowed_pattern = allowed_pattern
        self.masks = tuple(masks)
        self.keyboard_type = keyboard_type
        self.custom_formatters = custom_formatters
        self._helper: MaskEngine | None = None

    @property
    def helper(self) -> MaskEngine:
        """Mask state of the bound field, created on first access."""
        if self._helper is None:
            self._helper = MaskEngine(
                masks=self.masks,
                allowed_pattern=self.allowed_pattern,
                keyboard_type=self.keyboard_type,
                custom_formatters=self.custom_formatters,
            )
        return self._helper

    @property
    def requires_editor(self) -> bool:
        """Whether switching masks needs a persistent handle on the field text."""
        return self.custom_formatters is None and len(self.masks) > 1

    @property
    def filter_pattern(self) -> re.Pattern[str]:
        return self.helper.filter_pattern

    def input_formatters(self) -> list[TextFormatter]:
        return self.helper.build_formatters()

    def format_value(self, value: str) -> str:
        """Format a value the way typing it would, without touching any widget."""
        return self.helper.format_value(value)

    def release(self) -> None:
        """Drop the mask state; a new one is built on next use."""
        self._helper = None
