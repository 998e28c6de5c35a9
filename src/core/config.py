"""
Defaults shared by the masking and focus components.

Fields are configured purely by object construction; these constants are the
values used when a controller does not override them.
"""

from enum import Enum

APP_ORGANIZATION = "AutoForm"
APP_NAME = "AutoForm Validate"

# Reserved mask character standing for one input character
MASK_PLACEHOLDER = "#"

# Characters accepted by a field that does not configure its own filter
DEFAULT_ALLOWED_PATTERN = r"[a-zA-Z0-9]"

# Filter forced onto placeholders when the keyboard hint is numeric
DIGITS_PATTERN = r"[0-9]"

# Characters counted when measuring the clean length of a value
CLEAN_PATTERN = r"[a-zA-Z0-9]"

# Guard window coalescing focus requests from one validation pass
FOCUS_COOLDOWN_MS = 100

REQUIRED_MESSAGE = "This field is required"
VALIDATOR_FAILED_MESSAGE = "Validation error occurred"

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_MAX_BYTES = 5_242_880  # 5MB
LOG_BACKUP_COUNT = 5


class KeyboardType(Enum):
    """Preferred keyboard for a text field."""

    TEXT = "text"
    NUMBER = "number"
    PHONE = "phone"
    EMAIL = "email"
    DATETIME = "datetime"
    URL = "url"

    @property
    def is_numeric(self) -> bool:
        """Whether placeholders must be restricted to digits."""
        return self is KeyboardType.NUMBER
