"""
Tests for the masking primitives.

Tests cover:
- Filter-only formatting
- Lazy literal insertion and excess input
- Separator deletion and caret placement
- Mask pattern validation
"""

import re

import pytest

from core.errors import ConfigError, ErrorCode
from core.masking import (
    FilteringFormatter,
    MaskPattern,
    MaskTextFormatter,
    TextEditValue,
    clean_capacity,
    clean_length,
    compile_filter,
)


def type_text(formatter, text):
    """Feed characters one by one, as a user typing them."""
    value = TextEditValue()
    for ch in text:
        proposed = TextEditValue.at_end(value.text + ch)
        value = formatter.format_edit_update(value, proposed)
    return value


class TestTextEditValue:
    """Test the text edit value."""

    def test_at_end_collapses_selection(self):
        """Test that at_end places the caret after the text."""
        value = TextEditValue.at_end("abc")
        assert value.selection_start == 3
        assert value.selection_end == 3
        assert value.cursor == 3

    def test_default_is_empty(self):
        assert TextEditValue() == TextEditValue("", 0, 0)


class TestCleanLength:
    """Test clean length and capacity helpers."""

    def test_clean_length_ignores_separators(self):
        assert clean_length("(11) 2233-4455") == 10
        assert clean_length("") == 0
        assert clean_length("ab.c-1") == 4

    def test_clean_capacity(self):
        assert clean_capacity("(##) ####-####") == 10
        assert clean_capacity(MaskPattern("###.###.###-##")) == 11

    def test_compile_filter_rejects_invalid_pattern(self):
        """Test that an unparsable allowed pattern is a configuration error."""
        with pytest.raises(ConfigError) as exc_info:
            compile_filter("[a-z")
        assert exc_info.value.code == ErrorCode.CONFIG_INVALID

    def test_compile_filter_keeps_compiled_pattern(self):
        pattern = re.compile("[0-9]")
        assert compile_filter(pattern) is pattern


class TestMaskPattern:
    """Test mask pattern construction."""

    def test_placeholder_count(self):
        assert MaskPattern("(##) ####-####").placeholder_count == 10

    def test_capacity_counts_extra_placeholder(self):
        assert MaskPattern("##-##").capacity == 4
        assert MaskPattern("##-##").as_extensible().capacity == 5

    def test_extensible_adds_one_placeholder(self):
        pattern = MaskPattern("####-####").as_extensible()
        assert pattern.extensible
        assert pattern.effective_template == "####-#####"
        assert pattern.placeholder_count == 8

    def test_template_without_placeholder_is_rejected(self):
        with pytest.raises(ConfigError) as exc_info:
            MaskPattern("---")
        assert exc_info.value.code == ErrorCode.MASK_INVALID

    def test_multi_character_placeholder_is_rejected(self):
        with pytest.raises(ConfigError):
            MaskPattern("##", placeholder="##")

    def test_custom_placeholder(self):
        pattern = MaskPattern("XX/XX", placeholder="X")
        formatter = MaskTextFormatter(pattern, "[0-9]")
        assert formatter.mask_text("1224") == "12/24"


class TestFilteringFormatter:
    """Test the filter-only formatter."""

    def test_drops_rejected_characters(self):
        formatter = FilteringFormatter("[0-9]")
        result = formatter.format_edit_update(TextEditValue(), TextEditValue.at_end("a1-b2 3"))
        assert result.text == "123"
        assert result.cursor == 3

    def test_is_idempotent(self):
        """Test that formatting a formatted value changes nothing."""
        formatter = FilteringFormatter()
        once = formatter.format_edit_update(TextEditValue(), TextEditValue.at_end("ab c!d-12"))
        twice = formatter.format_edit_update(once, once)
        assert once.text == "abcd12"
        assert twice == once

    def test_keeps_caret_in_the_middle(self):
        formatter = FilteringFormatter("[0-9]")
        result = formatter.format_edit_update(TextEditValue("12", 1, 1), TextEditValue("1x2", 2, 2))
        assert result.text == "12"
        assert result.cursor == 1


class TestMaskTextFormatter:
    """Test formatting through a mask template."""

    def test_formats_phone_number(self):
        formatter = MaskTextFormatter(MaskPattern("(##) ####-####"), "[0-9]")
        assert formatter.mask_text("1122334455") == "(11) 2233-4455"
        assert formatter.get_unmasked_text() == "1122334455"
        assert formatter.is_fill()

    def test_literals_are_inserted_lazily(self):
        """Test that a separator only appears once a character follows it."""
        formatter = MaskTextFormatter(MaskPattern("(##) ####-####"), "[0-9]")
        assert formatter.mask_text("1") == "(1"
        assert formatter.mask_text("11") == "(11"
        assert formatter.mask_text("112") == "(11) 2"
        assert formatter.mask_text("112233") == "(11) 2233"
        assert not formatter.is_fill()

    def test_typing_character_by_character(self):
        formatter = MaskTextFormatter(MaskPattern("###.###.###-##"), "[0-9]")
        result = type_text(formatter, "12345678901")
        assert result.text == "123.456.789-01"
        assert result.cursor == len(result.text)

    def test_rejected_characters_are_dropped(self):
        formatter = MaskTextFormatter(MaskPattern("##-##"), "[0-9]")
        assert formatter.mask_text("1a2b3") == "12-3"

    def test_excess_characters_are_dropped(self):
        formatter = MaskTextFormatter(MaskPattern("##-##"), "[0-9]")
        assert formatter.mask_text("123456") == "12-34"
        assert formatter.get_unmasked_text() == "1234"

    def test_already_masked_text_is_stable(self):
        formatter = MaskTextFormatter(MaskPattern("(##) ####-####"), "[0-9]")
        value = TextEditValue.at_end("(11) 2233-4455")
        assert formatter.format_edit_update(value, value) == value

    def test_deleting_separator_removes_previous_character(self):
        """Test that backspacing over a literal also removes the character before it."""
        formatter = MaskTextFormatter(MaskPattern("##-##"), "[0-9]")
        # Caret after "12-", backspace removes the dash
        old_value = TextEditValue("12-3", 3, 3)
        new_value = TextEditValue("123", 2, 2)
        result = formatter.format_edit_update(old_value, new_value)
        assert result.text == "13"
        assert result.cursor == 1

    def test_forward_delete_on_separator_removes_next_character(self):
        """Test that Delete in front of a literal removes the character after it."""
        formatter = MaskTextFormatter(MaskPattern("(##) ####-####"), "[0-9]")
        # Caret before "-", forward delete removes the dash
        old_value = TextEditValue("(11) 2233-4455", 9, 9)
        new_value = TextEditValue("(11) 22334455", 9, 9)
        result = formatter.format_edit_update(old_value, new_value)
        assert result.text == "(11) 2233-455"
        assert result.cursor == 9

    def test_deleting_selected_separator_keeps_input(self):
        formatter = MaskTextFormatter(MaskPattern("##-##"), "[0-9]")
        old_value = TextEditValue("12-3", 2, 3)
        result = formatter.format_edit_update(old_value, TextEditValue("123", 2, 2))
        assert result.text == "12-3"

    def test_overflow_asks_for_wider_pattern(self):
        wide = MaskPattern("##.###.###/####-##")
        requested = []

        def on_overflow(length):
            requested.append(length)
            return wide

        formatter = MaskTextFormatter(MaskPattern("###.###.###-##").as_extensible(), "[0-9]", on_overflow)
        assert formatter.mask_text("12345678000195") == "12.345.678/0001-95"
        assert requested == [14]
        assert formatter.pattern is wide

    def test_deleting_last_character(self):
        formatter = MaskTextFormatter(MaskPattern("##-##"), "[0-9]")
        result = formatter.format_edit_update(TextEditValue.at_end("12-3"), TextEditValue.at_end("12-"))
        assert result.text == "12"

    def test_insert_in_the_middle_keeps_caret(self):
        formatter = MaskTextFormatter(MaskPattern("##-##"), "[0-9]")
        # Caret after "1", user types "9"
        result = formatter.format_edit_update(TextEditValue("12-3", 1, 1), TextEditValue("192-3", 2, 2))
        assert result.text == "19-23"
        assert result.cursor == 2

    def test_update_mask_reformats_value(self):
        formatter = MaskTextFormatter(MaskPattern("####-####"), "[0-9]")
        formatter.mask_text("12345678")
        result = formatter.update_mask(MaskPattern("#####-####"))
        assert result.text == "12345-678"
        assert formatter.pattern.template == "#####-####"

    def test_extensible_pattern_accepts_one_more_character(self):
        formatter = MaskTextFormatter(MaskPattern("####-####").as_extensible(), "[0-9]")
        assert formatter.mask_text("123456789") == "1234-56789"
        assert formatter.mask_text("1234567890") == "1234-56789"
