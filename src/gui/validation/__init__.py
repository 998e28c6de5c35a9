"""
Qt bindings of the form validation system.

This package drives the error-focus coordinator on the Qt event loop, moves
focus between widgets, and re-emits handled errors as Qt signals.
"""

from .auto_form import AutoForm
from .error_signal import ErrorSignal
from .focus import WidgetFocusHandle, clear_application_focus
from .qt_scheduler import QtScheduler

__all__ = [
    "AutoForm",
    "ErrorSignal",
    "QtScheduler",
    "WidgetFocusHandle",
    "clear_application_focus",
]
