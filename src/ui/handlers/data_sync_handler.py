"""
Handler for the startup and shutdown reconciliation flows.

Connects DataSyncService to the user: silent actions run directly,
conflicts are shown in a DataSyncDialog and failures in an error box.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from PyQt6.QtWidgets import QWidget

from src.services.data_sync_models import (
    DataSyncChoice,
    ExitRecommendation,
    ExitSyncChoice,
    StartupAction,
    StartupRecommendation,
    SyncMessage,
    SyncResult,
)
from src.ui.components.ui_helper import UIHelper
from src.ui.dialogs.data_sync_dialog import DataSyncDialog
from src.utils.i18n import t

if TYPE_CHECKING:
    from src.services.data_sync_service import DataSyncService

logger = logging.getLogger("gamedict.data_sync_handler")

__all__ = ["DataSyncHandler"]

AskCallback = Callable[[SyncMessage, QWidget | None], object]


class DataSyncHandler:
    """Runs the reconciliation flows of one application session.

    Attributes:
        service: The session's DataSyncService.
        parent: Parent widget for prompts; None until the main window exists.
        ask: Shows a SyncMessage and returns the chosen action or None.
    """

    def __init__(
        self,
        sync_service: DataSyncService,
        parent: QWidget | None = None,
        ask: AskCallback | None = None,
    ) -> None:
        self.service = sync_service
        self.parent = parent
        self.ask = ask or DataSyncDialog.ask

    def run_startup_sync(self) -> SyncResult:
        """Import the CSV directory or ask the user how to resolve a conflict.

        A cancelled prompt keeps the database as it is. After every
        successful run the service snapshot is re-taken so the imported
        rows are not reported as changes at shutdown.
        """
        status = self.service.analyze_data_status()

        if status.recommendation is StartupRecommendation.SKIP_IMPORT:
            return SyncResult.ok()

        if status.recommendation is StartupRecommendation.AUTO_IMPORT:
            result = self.service.perform_auto_import()
        else:
            action = self.ask(self.service.get_conflict_message(status), self.parent)
            choice = DataSyncChoice(action or StartupAction.KEEP_DB, confirmed=action is not None)
            result = self.service.perform_user_choice(choice)

        if result.success:
            self.service.record_initial_state()
        elif result.cancelled:
            logger.info(t("logs.sync.startup_cancelled"))
        else:
            self._show_error(t("ui.sync.startup_failed", error=result.error))
        return result

    def run_exit_sync(self) -> bool:
        """Write changes back to the CSV directory before closing.

        Returns:
            True if the application may close, False if the user cancelled
            the prompt or chose to stay after a failed export.
        """
        status = self.service.analyze_exit_status()

        if status.recommendation is ExitRecommendation.SKIP_EXPORT:
            return True

        if status.recommendation is ExitRecommendation.AUTO_EXPORT:
            result = self.service.perform_auto_export()
        else:
            action = self.ask(self.service.get_exit_message(status), self.parent)
            if action is None:
                logger.info(t("logs.sync.exit_cancelled"))
                return False
            result = self.service.perform_exit_choice(ExitSyncChoice(action))

        if result.success:
            return True

        self._show_error(t("ui.sync.export_failed", error=result.error))
        return self._confirm_close_anyway()

    def _show_error(self, message: str) -> None:
        UIHelper.show_error(self.parent, message)

    def _confirm_close_anyway(self) -> bool:
        return UIHelper.confirm(self.parent, t("ui.sync.close_anyway"))
