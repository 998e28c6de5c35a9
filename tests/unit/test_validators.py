"""
Tests for the ready-made validators.
"""

from core.validators import clean_length_in, compose, matches, required


class TestRequired:
    """Test the required validator."""

    def test_rejects_empty_values(self):
        validate = required()
        assert validate(None) == "This field is required"
        assert validate("") == "This field is required"
        assert validate("   ") == "This field is required"
        assert validate(False) == "This field is required"

    def test_accepts_values(self):
        validate = required()
        assert validate("123") is None
        assert validate(True) is None
        assert validate(0) is None

    def test_custom_message(self):
        assert required("Choose a plan")(None) == "Choose a plan"


class TestCleanLengthIn:
    """Test the masked length validator."""

    def test_counts_only_letters_and_digits(self):
        validate = clean_length_in(10, 11)
        assert validate("(11) 2233-4455") is None
        assert validate("(11) 92233-4455") is None
        assert validate("(11) 2233") == "Incomplete value"

    def test_empty_value_passes(self):
        assert clean_length_in(4)("") is None


class TestMatches:
    """Test the pattern validator."""

    def test_full_match_required(self):
        validate = matches(r"[a-z]+@[a-z]+\.com")
        assert validate("me@example.com") is None
        assert validate("me@example.com.br") == "Invalid format"
        assert validate("") is None


class TestCompose:
    """Test chaining validators."""

    def test_first_error_wins(self):
        validate = compose(required(), clean_length_in(4, message="Too short"))
        assert validate("") == "This field is required"
        assert validate("12") == "Too short"
        assert validate("1234") is None
