"""
Tests for the example MainWindow.
"""

from unittest.mock import patch

from PySide6.QtCore import QDate, Qt
from PySide6.QtTest import QTest

from gui.main_window import MainWindow, document_controller, phone_controller


def fill_contact(qtbot, window):
    window.name_edit.set_value("Ana Souza")
    window.phone_edit.set_value("11922334455")
    window.document_edit.set_value("12345678901")
    # Mobile numbers switch to the longer mask after the edit
    qtbot.waitUntil(lambda: window.phone_edit.text() == "(11) 92233-4455", timeout=1000)


class TestControllers:
    """Test the ready-made controllers of the example window."""

    def test_phone_controller(self):
        controller = phone_controller()
        assert controller.format_value("1122334455") == "(11) 2233-4455"
        assert controller.validate("(11) 2233-4455") is None
        assert controller.validate("(11) 2233") == "Incomplete phone number"
        assert controller.validate("") == "This field is required"

    def test_document_controller(self):
        controller = document_controller()
        assert controller.format_value("12345678901") == "123.456.789-01"
        assert controller.format_value("12345678000195") == "12.345.678/0001-95"
        assert controller.validate("123.456.789-01") is None
        assert controller.validate("123.456") == "Enter a valid CPF or CNPJ"


class TestMainWindow:
    """Test validating the tabbed example forms."""

    def test_window_properties(self, qtbot):
        window = MainWindow()
        qtbot.addWidget(window)

        assert window.windowTitle() == "AutoForm Validate"
        assert window.tabs.tabText(0) == "Contact"
        assert window.tabs.tabText(1) == "Preferences"

    def test_empty_contact_tab_is_reported(self, qtbot):
        window = MainWindow()
        qtbot.addWidget(window)

        with patch.object(window.name_edit, "setFocus") as set_focus:
            QTest.mouseClick(window.validate_button, Qt.MouseButton.LeftButton)
            qtbot.waitUntil(lambda: set_focus.called, timeout=1000)

        assert window.tabs.currentIndex() == 0
        assert window.name_edit.error_text == "This field is required"
        assert window.phone_edit.error_text == "This field is required"
        # Preferences tab is only validated once the contact tab passes
        assert window.plan_field.error_text is None

    def test_switches_to_first_invalid_tab(self, qtbot):
        window = MainWindow()
        qtbot.addWidget(window)
        fill_contact(qtbot, window)

        assert window.validate() is False

        assert window.tabs.currentIndex() == 1
        assert window.plan_field.error_text == "Choose a plan"
        assert window.terms_field.error_text == "You must accept the terms"
        assert "Preferences" in window.statusBar().currentMessage()

    def test_all_valid(self, qtbot):
        window = MainWindow()
        qtbot.addWidget(window)
        fill_contact(qtbot, window)
        window.plan_field.combo.setCurrentIndex(1)
        window.start_date_field.date_edit.setDate(QDate(2025, 3, 1))
        window.terms_field.checkbox.setChecked(True)

        assert window.validate() is True
        assert window.statusBar().currentMessage() == "All fields are valid"

    def test_reset(self, qtbot):
        window = MainWindow()
        qtbot.addWidget(window)
        fill_contact(qtbot, window)
        window.validate()

        window.reset()

        assert window.name_edit.text() == ""
        assert window.phone_edit.text() == ""
        assert window.tabs.currentIndex() == 0
        assert window.plan_field.error_text is None
