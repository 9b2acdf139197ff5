#!/usr/bin/env python3
"""Game Dictionary Manager - Main Entry Point (PyQt6 Version)."""

from __future__ import annotations

import logging
import sqlite3
import sys
from pathlib import Path

# Add project root directory to path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Local imports
from src.config import config
from src.core.db import Database
from src.core.logging import logger, setup_logging
from src.services.data_sync_service import DataSyncService
from src.ui.handlers.data_sync_handler import DataSyncHandler
from src.ui.main_window import MainWindow
from src.utils.i18n import init_i18n, t
from src.version import __app_name__, __version__

# PyQt6 imports
from PyQt6.QtWidgets import QApplication, QMessageBox

__all__ = ["main"]


def main() -> None:
    """Main application execution flow."""
    # 1. Initialize language (BEFORE creating UI elements)
    init_i18n(config.UI_LANGUAGE)

    # 2. Setup logging
    setup_logging(logging.DEBUG if "--debug" in sys.argv else logging.INFO, config.get_log_path())

    # 3. Create QApplication
    app = QApplication(sys.argv)
    app.setApplicationName(__app_name__)
    app.setApplicationVersion(__version__)

    logger.info("=" * 60)
    logger.info("%s %s", __app_name__, __version__)
    logger.info("=" * 60)
    logger.info(t("logs.main.mode", mode=config.MODE.value, csv_dir=str(config.get_csv_dir())))

    # 4. Open the working database
    try:
        database = Database(config.get_db_path())
    except (OSError, sqlite3.Error) as e:
        logger.critical(t("logs.main.db_open_failed", path=str(config.get_db_path()), error=str(e)))
        QMessageBox.critical(None, t("common.error"), t("ui.messages.db_open_failed", error=str(e)))
        sys.exit(1)

    # 5. Reconcile with the CSV directory before the window shows any data
    sync_handler = DataSyncHandler(DataSyncService(database, config.get_csv_dir()))
    sync_handler.run_startup_sync()

    # 6. Main window; closing it runs the shutdown reconciliation
    window = MainWindow(database, sync_handler, config.get_export_dir())
    window.show()

    exit_code = app.exec()
    database.close()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
