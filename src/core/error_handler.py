"""
Centralized error handling and logging infrastructure for AutoForm.

This module provides a singleton ErrorHandler that captures, logs, and
normalizes exceptions raised by caller-supplied validators, and notifies
subscribers (the Qt layer forwards them as a signal).
"""

from __future__ import annotations

import logging
import logging.handlers
import traceback
from collections.abc import Callable
from pathlib import Path
from typing import Any, ClassVar

from .config import LOG_BACKUP_COUNT, LOG_DATE_FORMAT, LOG_FORMAT, LOG_MAX_BYTES
from .errors import BaseAppError, ErrorSeverity, map_exception

_SEVERITY_LEVELS = {
    ErrorSeverity.LOW: logging.INFO,
    ErrorSeverity.MEDIUM: logging.WARNING,
    ErrorSeverity.HIGH: logging.ERROR,
}


class ErrorHandler:
    """
    Centralized error handler.

    This singleton class provides:
    - Exception capture and normalization
    - Logging at a level derived from the error severity
    - Subscriber notification for UI integration
    """

    _instance: ClassVar[ErrorHandler | None] = None

    def __new__(cls) -> ErrorHandler:
        """Ensure singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        """Initialize the error handler (called only once due to singleton)."""
        if hasattr(self, "_initialized"):
            return

        self._initialized = True
        self._logger = logging.getLogger("autoform.errors")
        self._subscribers: list[Callable[[BaseAppError], None]] = []

    def subscribe(self, callback: Callable[[BaseAppError], None]) -> None:
        """Register a callback invoked with every handled error."""
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[BaseAppError], None]) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def capture(self, exception: Exception, context: dict[str, Any] | None = None) -> BaseAppError:
        """
        Capture and normalize an exception into a BaseAppError.

        Args:
            exception: The exception to capture
            context: Optional context information

        Returns:
            BaseAppError with normalized metadata
        """
        safe_context = self._sanitize_context(context or {})
        app_error = map_exception(exception, safe_context)

        if not app_error.technical_message:
            app_error.technical_message = f"{type(exception).__name__}: {exception}"

        if "traceback" not in app_error.context and not isinstance(exception, BaseAppError):
            tb_str = traceback.format_exc()
            if tb_str == "NoneType: None\n":
                tb_str = f"{type(exception).__name__}: {exception}\n"
            app_error.context["traceback"] = tb_str

        return app_error

    def handle(self, exception: Exception, context: dict[str, Any] | None = None) -> BaseAppError:
        """
        Handle an exception by capturing, logging, and notifying subscribers.

        Args:
            exception: The exception to handle
            context: Optional context information

        Returns:
            BaseAppError for further processing
        """
        if isinstance(exception, SystemExit | KeyboardInterrupt):
            raise exception

        app_error = self.capture(exception, context)

        level = _SEVERITY_LEVELS.get(app_error.severity, logging.ERROR)
        self._logger.log(
            level,
            f"[{app_error.code.value}] {app_error.user_message}",
            extra={
                "app_code": app_error.code.value,
                "error_type": app_error.type.value,
                "severity": app_error.severity.value,
            },
            exc_info=exception if level >= logging.ERROR else None,
        )

        for callback in list(self._subscribers):
            try:
                callback(app_error)
            except Exception:
                self._logger.exception("Error subscriber failed")

        return app_error

    def _sanitize_context(self, context: dict[str, Any]) -> dict[str, Any]:
        """
        Sanitize context to prevent sensitive data leakage.

        Args:
            context: Raw context dictionary

        Returns:
            Sanitized context dictionary
        """
        safe_context: dict[str, Any] = {}
        max_items = 20

        for item_count, (key, value) in enumerate(context.items()):
            if item_count >= max_items:
                safe_context["..."] = f"({len(context) - max_items} more items truncated)"
                break

            if any(sensitive in key.lower() for sensitive in ["password", "token", "secret", "pin"]):
                safe_context[key] = "[REDACTED]"
            elif isinstance(value, str):
                safe_context[key] = value[:200] + "..." if len(value) > 200 else value
            else:
                try:
                    safe_context[key] = repr(value)[:200]
                except Exception:
                    safe_context[key] = "[REPR_FAILED]"

        return safe_context


def get_error_handler() -> ErrorHandler:
    """
    Get the global ErrorHandler instance.

    Returns:
        The singleton ErrorHandler instance
    """
    return ErrorHandler()


def init_logging(level: int = logging.INFO, log_file: Path | None = None) -> None:
    """
    Initialize logging configuration.

    Args:
        level: Root logging level
        log_file: Optional file receiving a rotated copy of the log
    """
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    if log_file is None:
        return

    log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logging.getLogger().addHandler(file_handler)
