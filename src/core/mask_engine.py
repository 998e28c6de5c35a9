"""
Mask selection and formatting for a single bound field.

``MaskEngine`` owns the candidate patterns of one field, the active pattern
and the memoized formatter list handed to the host. When several patterns
are configured it switches between them as the clean length of the value
crosses their capacities.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import Protocol

from .config import DEFAULT_ALLOWED_PATTERN, DIGITS_PATTERN, MASK_PLACEHOLDER, KeyboardType
from .errors import ConfigError, ErrorCode
from .masking import (
    FilteringFormatter,
    MaskPattern,
    MaskTextFormatter,
    TextEditValue,
    TextFormatter,
    clean_length,
    compile_filter,
)
from .scheduling import Scheduler

logger = logging.getLogger(__name__)


class TextEditor(Protocol):
    """Persistent handle on the text displayed by a field."""

    @property
    def text(self) -> str: ...

    def set_value(self, value: TextEditValue) -> None: ...


class MaskEngine:
    """
    Mask state of one field.

    Patterns are sorted by placeholder count; every pattern but the longest is
    made extensible so a value one character too long for it is reformatted
    instead of cut while the engine moves on to the next pattern.
    """

    def __init__(
        self,
        masks: Sequence[str | MaskPattern] = (),
        allowed_pattern: re.Pattern[str] | str = DEFAULT_ALLOWED_PATTERN,
        keyboard_type: KeyboardType | None = None,
        custom_formatters: Sequence[TextFormatter] | None = None,
        placeholder: str = MASK_PLACEHOLDER,
    ):
        self.allowed_pattern = compile_filter(allowed_pattern)
        self.keyboard_type = keyboard_type
        self.custom_formatters = custom_formatters
        self.candidates: tuple[MaskPattern, ...] = self._prepare(masks, placeholder)
        self.active_pattern: MaskPattern | None = self.candidates[0] if self.candidates else None
        self._formatters: list[TextFormatter] | None = None
        self._mask_formatter: MaskTextFormatter | None = None

    @staticmethod
    def _prepare(masks: Sequence[str | MaskPattern], placeholder: str) -> tuple[MaskPattern, ...]:
        patterns = [m if isinstance(m, MaskPattern) else MaskPattern(m, placeholder) for m in masks]
        patterns.sort(key=lambda p: p.placeholder_count)
        prepared = [p.as_extensible() for p in patterns[:-1]]
        prepared.extend(patterns[-1:])
        return tuple(prepared)

    @property
    def filter_pattern(self) -> re.Pattern[str]:
        """Filter applied to placeholders; digits only for numeric keyboards."""
        if self.keyboard_type is not None and self.keyboard_type.is_numeric:
            return re.compile(DIGITS_PATTERN)
        return self.allowed_pattern

    @property
    def has_multiple_masks(self) -> bool:
        return self.custom_formatters is None and len(self.candidates) > 1

    def build_formatters(self) -> list[TextFormatter]:
        """
        Build the formatters handed to the host, once.

        Returns:
            The same list object on every call
        """
        if self._formatters is not None:
            return self._formatters

        if self.custom_formatters is not None:
            self._formatters = list(self.custom_formatters)
        elif not self.candidates:
            self._formatters = [FilteringFormatter(self.allowed_pattern)]
        else:
            on_overflow = self._fit_overflow if self.has_multiple_masks else None
            pattern = self.active_pattern or self.candidates[0]
            self._mask_formatter = MaskTextFormatter(pattern, self.filter_pattern, on_overflow)
            self._formatters = [self._mask_formatter]

        logger.debug(f"Built formatters {self._formatters}")
        return self._formatters

    def format_value(self, value: str) -> str:
        """
        Format a literal value in one simulated edit pass.

        Used to pre-format the initial value of a field. With several
        patterns, the one that best fits the value becomes active first.
        """
        formatters = self.build_formatters()
        if self.has_multiple_masks:
            self._activate(self.select_pattern(value))

        old_value = TextEditValue()
        new_value = TextEditValue.at_end(value)
        for formatter in formatters:
            new_value = formatter.format_edit_update(old_value, new_value)
        return new_value.text

    def select_pattern(self, value: str) -> MaskPattern:
        """Smallest pattern that holds the value, else the longest."""
        return self._smallest_holding(clean_length(value))

    def _smallest_holding(self, length: int) -> MaskPattern:
        for pattern in self.candidates:
            if pattern.placeholder_count >= length:
                return pattern
        return self.candidates[-1]

    def _fit_overflow(self, length: int) -> MaskPattern:
        # Called by the mask formatter while it formats an oversized edit
        pattern = self._smallest_holding(length)
        if pattern != self.active_pattern:
            logger.debug(f"Mask switched to '{pattern.template}' for an edit of clean length {length}")
            self.active_pattern = pattern
        return pattern

    def next_pattern(self) -> MaskPattern | None:
        if self.active_pattern is None:
            return None
        capacity = self.active_pattern.placeholder_count
        larger = [p for p in self.candidates if p.placeholder_count > capacity]
        return min(larger, key=lambda p: p.placeholder_count) if larger else None

    def previous_pattern(self) -> MaskPattern | None:
        if self.active_pattern is None:
            return None
        capacity = self.active_pattern.placeholder_count
        smaller = [p for p in self.candidates if p.placeholder_count < capacity]
        return max(smaller, key=lambda p: p.placeholder_count) if smaller else None

    def update_mask(self, value: str, editor: TextEditor, scheduler: Scheduler) -> MaskPattern | None:
        """
        Re-select the active pattern after an edit.

        The reformatted text is written to the editor after the current edit
        has been applied by the host.

        Args:
            value: Current text of the field
            editor: Handle the reformatted text is written to
            scheduler: Event-loop scheduler of the host

        Returns:
            The newly active pattern, or None when nothing changed
        """
        if not self.has_multiple_masks or self.active_pattern is None:
            return None

        length = clean_length(value)
        upper = self.next_pattern()
        lower = self.previous_pattern()

        if upper is not None and length > self.active_pattern.placeholder_count:
            target = self._smallest_holding(length)
        elif lower is not None and length <= lower.placeholder_count:
            target = self._smallest_holding(length)
        else:
            return None

        formatter = self._require_mask_formatter()
        self._activate(target)
        formatted = formatter.update_mask(target, TextEditValue.at_end(value))
        logger.debug(f"Mask switched to '{target.template}' for clean length {length}")

        scheduler.call_soon(lambda: editor.set_value(formatted))
        return target

    def _require_mask_formatter(self) -> MaskTextFormatter:
        self.build_formatters()
        if self._mask_formatter is None:
            raise ConfigError(
                code=ErrorCode.CONFIG_INVALID,
                user_message="Mask switching needs a mask formatter",
                context={"masks": [str(p) for p in self.candidates]},
            )
        return self._mask_formatter

    def _activate(self, pattern: MaskPattern) -> None:
        if pattern == self.active_pattern:
            return
        self.active_pattern = pattern
        if self._mask_formatter is not None:
            # The previous text may not fit the new pattern; callers reformat
            self._mask_formatter.update_mask(pattern, TextEditValue())
