"""
GUI-specific utilities for AutoForm widgets.
"""

from .styling import AccessiblePalette, StyleSheets, apply_error_state

__all__ = [
    "AccessiblePalette",
    "StyleSheets",
    "apply_error_state",
]
