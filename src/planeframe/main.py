"""
Application Initialization
==========================
This module constructs the model store, the main window and starts the Qt
event loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Configures the Qt application identity, so QSettings resolves to the
   application's INI file.
2. Instantiates the model store (Model) and the Main Window (View).
3. Prevents circular import errors by being the orchestrator.
"""
import os
import sys
from typing import Optional, Sequence

from PySide6.QtCore import QCoreApplication, QSettings
from PySide6.QtWidgets import QApplication

from planeframe.config import APP_ID, ORG_DOMAIN, ORG_ID, VISIBLE_APP_NAME, load_settings
from planeframe.controller.store import ModelStore
from planeframe.logging_config import install_qt_message_handler, setup_logging_from_env
from planeframe.view.main_window import MainWindow


def create_app(argv: Optional[Sequence[str]] = None) -> QApplication:
    """Create and configure the QApplication instance."""
    os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")

    QCoreApplication.setOrganizationName(ORG_ID)
    QCoreApplication.setOrganizationDomain(ORG_DOMAIN)
    QCoreApplication.setApplicationName(APP_ID)
    QSettings.setDefaultFormat(QSettings.Format.IniFormat)

    app = QApplication(list(argv) if argv is not None else sys.argv)
    app.setApplicationDisplayName(VISIBLE_APP_NAME)
    return app


def main() -> None:
    setup_logging_from_env()
    install_qt_message_handler()

    app = create_app()
    settings = load_settings()

    store = ModelStore()
    window = MainWindow(store, settings)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
