"""
Reusable form field widgets.

Each widget owns a field state and can be registered with an AutoForm.
"""

from .auto_line_edit import AutoLineEdit
from .field_wrapper import AutoFieldWrapper, CheckBoxField, ComboBoxField, DateField

__all__ = ["AutoFieldWrapper", "AutoLineEdit", "CheckBoxField", "ComboBoxField", "DateField"]
