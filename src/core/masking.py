"""
Text masking primitives.

A mask template mixes literal separators with a reserved placeholder
character (``#`` by default). Each placeholder consumes one input character
accepted by the formatter's filter; literal separators are inserted lazily,
only once another input character follows them.

This module has no UI dependency: formatters receive the previous and the
proposed ``TextEditValue`` of a field and return the value to display.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Protocol

from .config import CLEAN_PATTERN, DEFAULT_ALLOWED_PATTERN, MASK_PLACEHOLDER
from .errors import ConfigError, ErrorCode

_CLEAN_RE = re.compile(CLEAN_PATTERN)


@dataclass(frozen=True)
class TextEditValue:
    """Text of an editable field together with its selection."""

    text: str = ""
    selection_start: int = 0
    selection_end: int = 0

    @classmethod
    def at_end(cls, text: str) -> TextEditValue:
        """Value with the caret collapsed after the last character."""
        return cls(text, len(text), len(text))

    @property
    def cursor(self) -> int:
        return self.selection_end


class TextFormatter(Protocol):
    """Contract invoked by the host on every edit of a text field."""

    def format_edit_update(self, old_value: TextEditValue, new_value: TextEditValue) -> TextEditValue: ...


@dataclass(frozen=True)
class MaskPattern:
    """
    Immutable mask template.

    An extensible pattern accepts one input character past its nominal
    capacity, so a value that outgrew it is reformatted rather than cut
    while the owning field switches to a longer pattern.
    """

    template: str
    placeholder: str = MASK_PLACEHOLDER
    extensible: bool = False

    def __post_init__(self) -> None:
        if len(self.placeholder) != 1:
            raise ConfigError(
                code=ErrorCode.MASK_INVALID,
                user_message="Mask placeholder must be a single character",
                context={"placeholder": self.placeholder},
            )
        if self.placeholder not in self.template:
            raise ConfigError(
                code=ErrorCode.MASK_INVALID,
                user_message=f"Mask '{self.template}' has no '{self.placeholder}' placeholder",
                context={"template": self.template},
            )

    @property
    def placeholder_count(self) -> int:
        """Nominal number of input characters the template holds."""
        return self.template.count(self.placeholder)

    @property
    def capacity(self) -> int:
        """Input characters the pattern holds, the extra one included."""
        return self.placeholder_count + 1 if self.extensible else self.placeholder_count

    @property
    def effective_template(self) -> str:
        if self.extensible:
            return self.template + self.placeholder
        return self.template

    def as_extensible(self) -> MaskPattern:
        return replace(self, extensible=True)

    def __str__(self) -> str:
        return self.template


def clean_length(value: str) -> int:
    """Count the alphanumeric characters of a value, ignoring separators."""
    return len(_CLEAN_RE.findall(value))


def clean_capacity(pattern: MaskPattern | str, placeholder: str = MASK_PLACEHOLDER) -> int:
    """Count the placeholder characters of a template."""
    if isinstance(pattern, MaskPattern):
        return pattern.placeholder_count
    return pattern.count(placeholder)


def compile_filter(pattern: re.Pattern[str] | str) -> re.Pattern[str]:
    """Compile an allowed-character pattern, raising ConfigError when invalid."""
    if isinstance(pattern, re.Pattern):
        return pattern
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ConfigError(
            code=ErrorCode.CONFIG_INVALID,
            user_message=f"Invalid allowed-character pattern: {pattern}",
            technical_message=str(e),
        ) from e


class FilteringFormatter:
    """Pass-through formatter that drops every character the filter rejects."""

    def __init__(self, allowed: re.Pattern[str] | str = DEFAULT_ALLOWED_PATTERN):
        self.allowed = compile_filter(allowed)

    def filter_text(self, text: str) -> str:
        return "".join(ch for ch in text if self.allowed.fullmatch(ch))

    def format_edit_update(self, old_value: TextEditValue, new_value: TextEditValue) -> TextEditValue:
        text = new_value.text
        start = len(self.filter_text(text[: new_value.selection_start]))
        end = len(self.filter_text(text[: new_value.selection_end]))
        return TextEditValue(self.filter_text(text), start, end)

    def __repr__(self) -> str:
        return f"FilteringFormatter({self.allowed.pattern!r})"


class MaskTextFormatter:
    """
    Formats input through a mutable mask pattern.

    The pattern can be swapped with ``update_mask`` while the formatter stays
    attached to the same field. ``on_overflow`` is asked for a wider pattern
    when a single edit, such as a paste, brings more input characters than
    the active pattern holds; without it the excess is dropped.
    """

    def __init__(
        self,
        pattern: MaskPattern,
        filter: re.Pattern[str] | str = DEFAULT_ALLOWED_PATTERN,
        on_overflow: Callable[[int], MaskPattern] | None = None,
    ):
        self._pattern = pattern
        self._filter = compile_filter(filter)
        self._on_overflow = on_overflow
        self._unmasked = ""

    @property
    def pattern(self) -> MaskPattern:
        return self._pattern

    @property
    def filter(self) -> re.Pattern[str]:
        return self._filter

    def get_unmasked_text(self) -> str:
        """Accepted input characters of the last formatted value."""
        return self._unmasked

    def is_fill(self) -> bool:
        """Whether the last value filled every nominal placeholder."""
        return len(self._unmasked) >= self._pattern.placeholder_count

    def format_edit_update(self, old_value: TextEditValue, new_value: TextEditValue) -> TextEditValue:
        text = new_value.text
        cursor = min(new_value.selection_end, len(text))

        # A single deleted separator takes the nearest input character on the
        # deleting side along, otherwise reformatting would put it straight back.
        old_text = old_value.text
        if (
            len(text) == len(old_text) - 1
            and cursor < len(old_text)
            and old_value.selection_start == old_value.selection_end
            and old_text[:cursor] + old_text[cursor + 1 :] == text
            and not self._accepts(old_text[cursor])
        ):
            if old_value.cursor == cursor + 1:
                # Backspace
                idx = self._last_accepted_index(text[:cursor])
                if idx >= 0:
                    text = text[:idx] + text[idx + 1 :]
                    cursor = idx
            elif old_value.cursor == cursor:
                # Forward delete
                idx = self._first_accepted_index(text, cursor)
                if idx >= 0:
                    text = text[:idx] + text[idx + 1 :]

        chars, before_cursor = self._extract(text, cursor)
        if self._on_overflow is not None and len(chars) > self._pattern.capacity:
            self._pattern = self._on_overflow(len(chars))
        masked, used = self._apply(chars)
        self._unmasked = "".join(chars[:used])

        position = self._caret_position(masked, min(before_cursor, used))
        return TextEditValue(masked, position, position)

    def update_mask(self, pattern: MaskPattern, value: TextEditValue | None = None) -> TextEditValue:
        """
        Switch to another pattern and reformat a value under it.

        Args:
            pattern: The new active pattern
            value: Current field value; defaults to the last unmasked text

        Returns:
            The value formatted under the new pattern
        """
        if value is None:
            value = TextEditValue.at_end(self._unmasked)
        self._pattern = pattern
        return self.format_edit_update(TextEditValue(), TextEditValue.at_end(value.text))

    def mask_text(self, text: str) -> str:
        """Format a literal value in a single edit pass."""
        return self.format_edit_update(TextEditValue(), TextEditValue.at_end(text)).text

    def _accepts(self, ch: str) -> bool:
        return self._filter.fullmatch(ch) is not None

    def _last_accepted_index(self, text: str) -> int:
        for idx in range(len(text) - 1, -1, -1):
            if self._accepts(text[idx]):
                return idx
        return -1

    def _first_accepted_index(self, text: str, start: int) -> int:
        for idx in range(start, len(text)):
            if self._accepts(text[idx]):
                return idx
        return -1

    def _is_masked(self, text: str) -> bool:
        template = self._pattern.effective_template
        if len(text) > len(template):
            return False
        for ch, symbol in zip(text, template):
            if symbol == self._pattern.placeholder:
                if not self._accepts(ch):
                    return False
            elif ch != symbol:
                return False
        return True

    def _extract(self, text: str, cursor: int) -> tuple[list[str], int]:
        """Pull the input characters out of a raw or already-masked text."""
        template = self._pattern.effective_template
        placeholder = self._pattern.placeholder
        masked = self._is_masked(text)

        chars: list[str] = []
        before_cursor = 0
        for idx, ch in enumerate(text):
            if masked:
                keep = template[idx] == placeholder
            else:
                keep = self._accepts(ch)
            if keep:
                chars.append(ch)
                if idx < cursor:
                    before_cursor += 1
        return chars, before_cursor

    def _apply(self, chars: list[str]) -> tuple[str, int]:
        out: list[str] = []
        used = 0
        for symbol in self._pattern.effective_template:
            if used >= len(chars):
                break
            if symbol == self._pattern.placeholder:
                out.append(chars[used])
                used += 1
            else:
                out.append(symbol)
        # Characters past the template capacity are dropped.
        return "".join(out), used

    def _caret_position(self, masked: str, clean_before: int) -> int:
        if clean_before <= 0:
            return 0
        seen = 0
        for idx, symbol in enumerate(self._pattern.effective_template[: len(masked)]):
            if symbol == self._pattern.placeholder:
                seen += 1
                if seen == clean_before:
                    return idx + 1
        return len(masked)

    def __repr__(self) -> str:
        return f"MaskTextFormatter({self._pattern.effective_template!r})"
