"""
Main entry point for the AutoForm example application.
"""

import sys

from PySide6.QtWidgets import QApplication

from core.config import APP_NAME, APP_ORGANIZATION
from core.error_handler import init_logging
from gui.main_window import MainWindow


def main() -> int:
    """Main application entry point."""
    init_logging()

    app = QApplication(sys.argv)
    app.setOrganizationName(APP_ORGANIZATION)
    app.setApplicationName(APP_NAME)

    # Create and show the main window
    window = MainWindow()
    window.show()

    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
