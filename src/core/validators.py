"""
Ready-made validators for field controllers.

A validator takes the current value of a field and returns the message to
display, or None when the value is valid.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

from .config import REQUIRED_MESSAGE
from .masking import clean_length

ValidatorFunc = Callable[[Any], str | None]


def required(message: str = REQUIRED_MESSAGE) -> ValidatorFunc:
    """Fail on None, empty strings, whitespace-only strings and False."""

    def validate(value: Any) -> str | None:
        if value is None or value is False:
            return message
        if isinstance(value, str) and not value.strip():
            return message
        return None

    return validate


def clean_length_in(*lengths: int, message: str = "Incomplete value") -> ValidatorFunc:
    """
    Accept masked values whose count of letters and digits is one of ``lengths``.

    Empty values pass; combine with ``required`` to forbid them.
    """
    allowed = set(lengths)

    def validate(value: str | None) -> str | None:
        if not value:
            return None
        return None if clean_length(value) in allowed else message

    return validate


def matches(pattern: str, message: str = "Invalid format") -> ValidatorFunc:
    """Accept values fully matching ``pattern``. Empty values pass."""
    compiled = re.compile(pattern)

    def validate(value: str | None) -> str | None:
        if not value:
            return None
        return None if compiled.fullmatch(value) else message

    return validate


def compose(*validators: ValidatorFunc) -> ValidatorFunc:
    """Run validators in order and return the first error."""

    def validate(value: Any) -> str | None:
        for validator in validators:
            error = validator(value)
            if error is not None:
                return error
        return None

    return validate
