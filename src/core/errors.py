"""
Error taxonomy for AutoForm.

Validation failures are plain strings shown verbatim to the user; the classes
below give them (and configuration mistakes) a structured form for logging
and for callers that want to react to a specific failure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class ErrorType(Enum):
    """Error type categories."""

    VALIDATION = "validation"
    CONFIG = "config"
    SYSTEM = "system"


class ErrorCode(Enum):
    """Specific error codes for common scenarios."""

    # Validation errors
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_FORMAT = "INVALID_FORMAT"
    VALUE_OUT_OF_RANGE = "VALUE_OUT_OF_RANGE"
    REQUIRED_FIELD_MISSING = "REQUIRED_FIELD_MISSING"
    VALIDATOR_FAILED = "VALIDATOR_FAILED"

    # Configuration errors
    CONFIG_INVALID = "CONFIG_INVALID"
    EDITOR_MISSING = "EDITOR_MISSING"
    MASK_INVALID = "MASK_INVALID"

    # Generic
    UNKNOWN = "UNKNOWN"


class ErrorSeverity(Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass
class BaseAppError(Exception):
    """
    Base error carrying structured metadata.

    All errors raised or logged by AutoForm derive from this class.
    """

    type: ErrorType
    code: ErrorCode
    user_message: str
    technical_message: str | None = None
    severity: ErrorSeverity = ErrorSeverity.MEDIUM
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.user_message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"type={self.type.value}, "
            f"code={self.code.value}, "
            f"message='{self.user_message}'"
            f")"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "type": self.type.value,
            "code": self.code.value,
            "user_message": self.user_message,
            "technical_message": self.technical_message,
            "severity": self.severity.value,
            "context": self.context,
        }


class ValidationError(BaseAppError):
    """A field failed its validator."""

    def __init__(
        self,
        code: ErrorCode,
        user_message: str,
        field: str | None = None,
        technical_message: str | None = None,
        severity: ErrorSeverity = ErrorSeverity.LOW,
        context: dict[str, Any] | None = None,
    ):
        context = context or {}
        if field:
            context["field"] = field

        super().__init__(
            type=ErrorType.VALIDATION,
            code=code,
            user_message=user_message,
            technical_message=technical_message,
            severity=severity,
            context=context,
        )

    @property
    def field(self) -> str | None:
        """Get the field that caused the validation error."""
        return self.context.get("field")


class ConfigError(BaseAppError):
    """A field or form was constructed with an unusable configuration."""

    def __init__(
        self,
        code: ErrorCode,
        user_message: str,
        technical_message: str | None = None,
        severity: ErrorSeverity = ErrorSeverity.HIGH,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(
            type=ErrorType.CONFIG,
            code=code,
            user_message=user_message,
            technical_message=technical_message,
            severity=severity,
            context=context or {},
        )


class SystemError(BaseAppError):
    """Unexpected failure inside caller-supplied code."""

    def __init__(
        self,
        code: ErrorCode,
        user_message: str,
        technical_message: str | None = None,
        severity: ErrorSeverity = ErrorSeverity.HIGH,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(
            type=ErrorType.SYSTEM,
            code=code,
            user_message=user_message,
            technical_message=technical_message,
            severity=severity,
            context=context or {},
        )


_EXCEPTION_MAPPING: dict[type[Exception], tuple[ErrorType, ErrorCode, str]] = {
    ValueError: (ErrorType.VALIDATION, ErrorCode.INVALID_INPUT, "Invalid input provided"),
    TypeError: (ErrorType.VALIDATION, ErrorCode.VALIDATOR_FAILED, "Validation error occurred"),
    KeyError: (ErrorType.CONFIG, ErrorCode.CONFIG_INVALID, "Invalid configuration"),
}


def map_exception(exc: Exception, context: dict[str, Any] | None = None) -> BaseAppError:
    """
    Map a built-in exception to an application error.

    Args:
        exc: The exception to map
        context: Optional context information

    Returns:
        BaseAppError instance with appropriate type and metadata
    """
    context = context or {}

    if isinstance(exc, BaseAppError):
        return exc

    exc_type = type(exc)
    if exc_type in _EXCEPTION_MAPPING:
        error_type, error_code, default_message = _EXCEPTION_MAPPING[exc_type]
        error_class_map: dict[ErrorType, type[BaseAppError]] = {
            ErrorType.VALIDATION: ValidationError,
            ErrorType.CONFIG: ConfigError,
            ErrorType.SYSTEM: SystemError,
        }
        error_class = error_class_map[error_type]
        result: BaseAppError = error_class(
            code=error_code,
            user_message=str(exc) if str(exc) else default_message,
            technical_message=f"{exc_type.__name__}: {exc}",
            context=context,
        )
        return result

    logger.warning(f"Unknown exception type: {exc_type.__name__}: {exc}")
    return SystemError(
        code=ErrorCode.UNKNOWN,
        user_message="An unexpected error occurred",
        technical_message=f"{exc_type.__name__}: {exc}",
        context=context,
    )


def create_validation_error(field: str, message: str, value: Any = None) -> ValidationError:
    """
    Create a ValidationError for logging purposes.

    The code is guessed from the wording of the validator's message.

    Args:
        field: Field name that failed validation
        message: Validation error message
        value: The invalid value

    Returns:
        ValidationError instance
    """
    code = ErrorCode.INVALID_INPUT
    lowered = message.lower()

    if "required" in lowered or "empty" in lowered:
        code = ErrorCode.REQUIRED_FIELD_MISSING
    elif "format" in lowered or "pattern" in lowered or "invalid" in lowered:
        code = ErrorCode.INVALID_FORMAT
    elif "range" in lowered or "length" in lowered or "characters" in lowered:
        code = ErrorCode.VALUE_OUT_OF_RANGE

    return ValidationError(
        code=code,
        user_message=message,
        field=field,
        technical_message=f"Validation failed for field '{field}': {message}",
        context={"value": value} if value is not None else {},
    )
