"""
Shared test configuration.
"""

import os

import pytest

# Set offscreen platform to prevent display errors on headless systems
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from core.error_handler import get_error_handler  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_error_handler():
    """Drop error subscribers registered by a test."""
    handler = get_error_handler()
    subscribers = list(handler._subscribers)
    yield handler
    handler._subscribers[:] = subscribers
