"""
Tests for ErrorHandler.

Tests cover:
- Singleton pattern behavior
- Exception capture and context sanitization
- Logging levels and subscriber notification
- Logging setup
"""

import logging
import logging.handlers
from unittest.mock import patch

import pytest

from core.error_handler import ErrorHandler, get_error_handler, init_logging
from core.errors import BaseAppError, ErrorCode, ErrorType, ValidationError


class TestErrorHandlerSingleton:
    """Test the singleton pattern implementation."""

    def test_singleton_pattern(self):
        """Test that ErrorHandler follows singleton pattern."""
        assert ErrorHandler() is ErrorHandler()

    def test_get_error_handler_returns_singleton(self):
        assert get_error_handler() is ErrorHandler()


class TestErrorCapture:
    """Test exception capture and normalization."""

    def setup_method(self):
        """Set up test fixtures."""
        self.handler = get_error_handler()

    def test_capture_basic_exception(self):
        app_error = self.handler.capture(ValueError("Test error"))

        assert isinstance(app_error, BaseAppError)
        assert app_error.type == ErrorType.VALIDATION
        assert app_error.code == ErrorCode.INVALID_INPUT
        assert "ValueError: Test error" in app_error.technical_message
        assert "traceback" in app_error.context

    def test_capture_app_error_keeps_it(self):
        error = ValidationError(ErrorCode.INVALID_FORMAT, "Bad format", field="email")
        app_error = self.handler.capture(error)
        assert app_error is error
        assert "traceback" not in app_error.context

    def test_sensitive_context_is_redacted(self):
        app_error = self.handler.capture(RuntimeError("boom"), {"password": "hunter2", "field": "pin_code"})
        assert app_error.context["password"] == "[REDACTED]"
        assert app_error.context["field"] == "pin_code"

    def test_long_context_values_are_truncated(self):
        app_error = self.handler.capture(RuntimeError("boom"), {"value": "x" * 500})
        assert len(app_error.context["value"]) == 203


class TestErrorHandling:
    """Test logging and notification of handled errors."""

    def setup_method(self):
        """Set up test fixtures."""
        self.handler = get_error_handler()

    def test_validation_errors_logged_at_info(self, caplog):
        error = ValidationError(ErrorCode.REQUIRED_FIELD_MISSING, "This field is required", field="name")
        with caplog.at_level(logging.DEBUG, logger="autoform.errors"):
            self.handler.handle(error)

        record = caplog.records[-1]
        assert record.levelno == logging.INFO
        assert "[REQUIRED_FIELD_MISSING] This field is required" in record.getMessage()

    def test_unknown_errors_logged_at_error(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="autoform.errors"):
            self.handler.handle(RuntimeError("boom"))

        assert caplog.records[-1].levelno == logging.ERROR

    def test_subscribers_are_notified(self):
        received = []
        self.handler.subscribe(received.append)

        app_error = self.handler.handle(ValueError("bad"))

        assert received == [app_error]

    def test_unsubscribe(self):
        received = []
        self.handler.subscribe(received.append)
        self.handler.unsubscribe(received.append)

        self.handler.handle(ValueError("bad"))

        assert received == []

    def test_failing_subscriber_does_not_break_others(self):
        received = []

        def broken(app_error):
            raise RuntimeError("subscriber failed")

        self.handler.subscribe(broken)
        self.handler.subscribe(received.append)

        self.handler.handle(ValueError("bad"))

        assert len(received) == 1

    @pytest.mark.parametrize("exception", [KeyboardInterrupt(), SystemExit(1)])
    def test_exit_exceptions_are_reraised(self, exception):
        with pytest.raises(type(exception)):
            self.handler.handle(exception)


class TestInitLogging:
    """Test logging setup."""

    def test_basic_config(self):
        with patch("core.error_handler.logging.basicConfig") as mock_config:
            init_logging(logging.DEBUG)

        mock_config.assert_called_once()
        assert mock_config.call_args.kwargs["level"] == logging.DEBUG

    def test_log_file_gets_rotating_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "autoform.log"
        root = logging.getLogger()
        before = list(root.handlers)

        try:
            with patch("core.error_handler.logging.basicConfig"):
                init_logging(log_file=log_file)

            added = [h for h in root.handlers if h not in before]
            assert len(added) == 1
            assert isinstance(added[0], logging.handlers.RotatingFileHandler)
            assert added[0].maxBytes == 5 * 1024 * 1024
            assert added[0].backupCount == 5
            assert log_file.parent.exists()
        finally:
            for handler in root.handlers[:]:
                if handler not in before:
                    root.removeHandler(handler)
                    handler.close()
