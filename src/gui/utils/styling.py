"""
Shared styling for AutoForm widgets.

Error colors follow the same WCAG AA palette for every field kind: text
inputs get a red border through their ``hasError`` property, other widgets
show a red message below them.
"""

from typing import Any, Protocol


class StyleableWidget(Protocol):
    """Protocol for widgets that can be styled."""

    def setStyleSheet(self, styleSheet: str) -> None: ...
    def setProperty(self, name: str, value: Any) -> bool: ...
    def style(self) -> Any: ...


class AccessiblePalette:
    """Color palette with WCAG AA contrast."""

    BORDER_DEFAULT = "#dee2e6"  # Light border
    BORDER_FOCUS = "#0d6efd"  # Blue focus indicator
    BORDER_ERROR = "#dc3545"  # Error state border

    ERROR_TEXT = "#b02a37"  # Dark red, 4.5:1 on white
    TEXT_PRIMARY = "#212529"
    BACKGROUND_DEFAULT = "#ffffff"


# Font size of the message shown under a field
ERROR_FONT_SIZE_PX = 12


class StyleSheets:
    """Collection of reusable stylesheet definitions."""

    @staticmethod
    def get_line_edit_style() -> str:
        """Line edit stylesheet switching border color on the hasError property."""
        return f"""
            QLineEdit {{
                border: 1px solid {AccessiblePalette.BORDER_DEFAULT};
                border-radius: 4px;
                padding: 4px;
                background-color: {AccessiblePalette.BACKGROUND_DEFAULT};
                color: {AccessiblePalette.TEXT_PRIMARY};
            }}

            QLineEdit:focus {{
                border: 2px solid {AccessiblePalette.BORDER_FOCUS};
            }}

            QLineEdit[hasError="true"] {{
                border: 2px solid {AccessiblePalette.BORDER_ERROR};
            }}
        """

    @staticmethod
    def get_error_label_style() -> str:
        """Stylesheet of the error message below a wrapped field."""
        return f"""
            QLabel {{
                color: {AccessiblePalette.ERROR_TEXT};
                font-size: {ERROR_FONT_SIZE_PX}px;
                padding-top: 4px;
                padding-left: 4px;
            }}
        """


def apply_error_state(widget: StyleableWidget, error_text: str | None) -> None:
    """
    Set or clear the hasError property of a widget and refresh its style.

    Args:
        widget: The input widget to style
        error_text: Current error message, or None when valid
    """
    widget.setProperty("hasError", error_text is not None)

    # Force style refresh so the property selector is re-evaluated
    widget.style().unpolish(widget)
    widget.style().polish(widget)
