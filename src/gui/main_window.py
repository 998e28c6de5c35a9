"""
Main window of the AutoForm example application.

Two tabbed forms, validated in order: a contact page with masked text
fields and a preferences page with checkbox, dropdown and date fields.
"""

import logging

from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QFormLayout,
    QHBoxLayout,
    QMainWindow,
    QPushButton,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from core.config import APP_NAME, KeyboardType
from core.controller import FieldController, FormController
from core.errors import BaseAppError
from core.form import FormGroup
from core.validators import clean_length_in, compose, required
from gui.validation import AutoForm, ErrorSignal
from gui.widgets import AutoLineEdit, CheckBoxField, ComboBoxField, DateField

PHONE_MASKS = ("(##) ####-####", "(##) #####-####")
DOCUMENT_MASKS = ("###.###.###-##", "##.###.###/####-##")

logger = logging.getLogger(__name__)


def phone_controller() -> FormController:
    """Landline or mobile number, switching masks on the 11th digit."""
    return FormController(
        validator=compose(required(), clean_length_in(10, 11, message="Incomplete phone number")),
        masks=PHONE_MASKS,
        keyboard_type=KeyboardType.NUMBER,
    )


def document_controller() -> FormController:
    """CPF or CNPJ, switching masks on the 12th digit."""
    return FormController(
        validator=compose(required(), clean_length_in(11, 14, message="Enter a valid CPF or CNPJ")),
        masks=DOCUMENT_MASKS,
        keyboard_type=KeyboardType.NUMBER,
    )


def required_text_controller() -> FormController:
    return FormController(validator=required(), allowed_pattern=r"[\w \-']")


class MainWindow(QMainWindow):
    """
    Example window exercising every field kind.

    Pressing Validate checks the tabs in order and stops at the first one
    with an error, switching to it; focus then lands on its first failing
    field.
    """

    def __init__(self) -> None:
        """Initialize the main window."""
        super().__init__()
        self.setWindowTitle(APP_NAME)
        self.resize(480, 360)

        self.contact_form = AutoForm(self, name="contact")
        self.preferences_form = AutoForm(self, name="preferences")
        self.form_group = FormGroup([self.contact_form.form, self.preferences_form.form])

        self.tabs = QTabWidget()
        self.tabs.addTab(self._build_contact_page(), "Contact")
        self.tabs.addTab(self._build_preferences_page(), "Preferences")

        self.validate_button = QPushButton("Validate")
        self.validate_button.setObjectName("validateButton")
        self.validate_button.clicked.connect(self.validate)
        self.reset_button = QPushButton("Reset")
        self.reset_button.clicked.connect(self.reset)

        buttons = QHBoxLayout()
        buttons.addStretch()
        buttons.addWidget(self.reset_button)
        buttons.addWidget(self.validate_button)

        central = QWidget()
        layout = QVBoxLayout(central)
        layout.addWidget(self.tabs)
        layout.addLayout(buttons)
        self.setCentralWidget(central)

        # Errors handled anywhere in the app end up in the status bar
        self.error_signal = ErrorSignal(self)
        self.error_signal.errorOccurred.connect(self._on_error)

    def _build_contact_page(self) -> QWidget:
        page = QWidget()
        layout = QFormLayout(page)

        self.name_edit = AutoLineEdit(required_text_controller(), name="name")
        self.phone_edit = AutoLineEdit(phone_controller(), name="phone")
        self.document_edit = AutoLineEdit(document_controller(), name="document")
        self.name_edit.setPlaceholderText("Full name")
        self.phone_edit.setPlaceholderText("(11) 2233-4455")
        self.document_edit.setPlaceholderText("CPF or CNPJ")

        for label, edit in (("Name", self.name_edit), ("Phone", self.phone_edit), ("Document", self.document_edit)):
            layout.addRow(label, edit)
            self.contact_form.register(edit)
        return page

    def _build_preferences_page(self) -> QWidget:
        page = QWidget()
        layout = QFormLayout(page)

        self.plan_field = ComboBoxField(
            [("Free", "free"), ("Pro", "pro"), ("Enterprise", "enterprise")],
            FieldController(required("Choose a plan")),
            name="plan",
        )
        self.start_date_field = DateField(name="start_date", autovalidate=True)
        self.terms_field = CheckBoxField(
            "I accept the terms of service",
            FieldController(required("You must accept the terms")),
            name="terms",
            autovalidate=True,
        )

        layout.addRow("Plan", self.plan_field)
        layout.addRow("Start date", self.start_date_field)
        layout.addRow(self.terms_field)
        for field in (self.plan_field, self.start_date_field, self.terms_field):
            self.preferences_form.register(field)
        return page

    def validate(self) -> bool:
        """Validate the tabs in order; returns True when every tab is valid."""
        invalid = self.form_group.validate_all()
        if invalid is not None:
            self.tabs.setCurrentIndex(invalid)
            self.statusBar().showMessage(f"Please fix the errors on the {self.tabs.tabText(invalid)} tab")
            return False

        values = {**self.contact_form.values(), **self.preferences_form.values()}
        logger.info(f"Form submitted: {sorted(values)}")
        self.statusBar().showMessage("All fields are valid", 3000)
        return True

    def reset(self) -> None:
        self.contact_form.reset()
        self.preferences_form.reset()
        self.tabs.setCurrentIndex(0)
        self.statusBar().clearMessage()

    def _on_error(self, app_error: BaseAppError) -> None:
        self.statusBar().showMessage(app_error.user_message, 5000)

    def closeEvent(self, event: QCloseEvent) -> None:
        """Release the forms and their timers before closing."""
        self.error_signal.disconnect_handler()
        self.contact_form.cleanup()
        self.preferences_form.cleanup()
        super().closeEvent(event)
