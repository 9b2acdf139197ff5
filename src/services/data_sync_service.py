# src/services/data_sync_service.py

"""Startup and shutdown reconciliation between the CSV directory and the database.

The CSV directory is the Git-tracked source of truth, the SQLite database
the working copy. At startup the service decides whether the CSV can be
imported silently or the user has to choose; at shutdown it decides
whether the working copy has to be written back.

Action methods never raise for codec, filesystem or database failures:
they log and return a SyncResult so the UI can show the error.
"""

from __future__ import annotations

import csv
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from src.services.data_sync_messages import build_conflict_message, build_exit_message
from src.services.data_sync_models import (
    CANCELLED_ERROR,
    INVALID_ACTION_ERROR,
    ConflictType,
    DataSnapshot,
    DataSyncChoice,
    DataSyncStatus,
    ExitAction,
    ExitRecommendation,
    ExitSyncChoice,
    ExitSyncStatus,
    StartupAction,
    StartupRecommendation,
    SyncMessage,
    SyncResult,
)
from src.utils.csv_exporter import CSVExporter
from src.utils.csv_format import count_csv_entries, count_csv_games, has_csv_files
from src.utils.csv_importer import CSVImporter
from src.utils.i18n import t

if TYPE_CHECKING:
    from src.core.db import Database

logger = logging.getLogger("gamedict.data_sync")

__all__ = ["DataSyncService", "classify_data_status", "recommend_exit_action"]

# Failures an action may hit; anything else is a bug and propagates
_ACTION_ERRORS = (OSError, ValueError, csv.Error, sqlite3.Error)


def classify_data_status(
    csv_dir_exists: bool,
    csv_files_exist: bool,
    csv_game_count: int,
    csv_entry_count: int,
    db_game_count: int,
    db_entry_count: int,
) -> DataSyncStatus:
    """Classify the startup situation; the first matching rule wins.

    1. CSV directory or files absent: conflict only if the database has data.
    2. Database has more games or more entries than the CSV: unsaved work.
    3. Both sides hold data: mixed.
    4. Otherwise the CSV can be imported without asking.
    """
    db_has_data = db_game_count > 0 or db_entry_count > 0

    if not csv_dir_exists or not csv_files_exist:
        if db_has_data:
            conflict, recommendation = ConflictType.CSV_MISSING, StartupRecommendation.USER_CONFIRM
        else:
            conflict, recommendation = ConflictType.SAFE, StartupRecommendation.SKIP_IMPORT
    elif db_game_count > csv_game_count or db_entry_count > csv_entry_count:
        conflict, recommendation = ConflictType.DB_HAS_MORE_DATA, StartupRecommendation.USER_CONFIRM
    elif (csv_game_count > 0 or csv_entry_count > 0) and db_has_data:
        conflict, recommendation = ConflictType.MIXED_DATA, StartupRecommendation.USER_CONFIRM
    else:
        conflict, recommendation = ConflictType.SAFE, StartupRecommendation.AUTO_IMPORT

    return DataSyncStatus(
        csv_dir_exists=csv_dir_exists,
        csv_files_exist=csv_files_exist,
        csv_game_count=csv_game_count,
        csv_entry_count=csv_entry_count,
        db_game_count=db_game_count,
        db_entry_count=db_entry_count,
        has_conflict=recommendation is StartupRecommendation.USER_CONFIRM,
        conflict_type=conflict,
        recommendation=recommendation,
    )


def recommend_exit_action(
    has_changes: bool,
    db_game_count: int,
    db_entry_count: int,
    csv_game_count: int,
    csv_entry_count: int,
) -> ExitRecommendation:
    """Changes always need confirmation; an unexported database is backed up."""
    if has_changes:
        return ExitRecommendation.USER_CONFIRM
    if (db_game_count > 0 or db_entry_count > 0) and csv_game_count == 0 and csv_entry_count == 0:
        return ExitRecommendation.AUTO_EXPORT
    return ExitRecommendation.SKIP_EXPORT


class DataSyncService:
    """Reconciles one CSV directory with one database.

    One instance lives for the whole application run: the snapshot taken
    at construction is what the shutdown analysis compares against.
    """

    def __init__(
        self,
        database: Database,
        csv_dir: Path,
        importer: CSVImporter | None = None,
        exporter: CSVExporter | None = None,
    ) -> None:
        """Initializes the service and records the initial snapshot.

        Args:
            database: The working database.
            csv_dir: The Git-managed CSV directory (may not exist yet).
            importer: Importer override (tests).
            exporter: Exporter override (tests).
        """
        self.db = database
        self.csv_dir = Path(csv_dir)
        self.importer = importer or CSVImporter(database)
        self.exporter = exporter or CSVExporter(database)
        self.last_export_time: str | None = None
        self._snapshot: DataSnapshot | None = None
        self.record_initial_state()

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> DataSnapshot | None:
        return self._snapshot

    def record_initial_state(self) -> None:
        """Take the baseline the shutdown check compares against.

        Called again by the UI after a startup import so imported rows do
        not count as changes made during the session.
        """
        self._snapshot = DataSnapshot(self.db.get_game_count(), self.db.get_entry_count())
        logger.debug("Recorded snapshot: %s", self._snapshot)

    def mark_last_export_time(self) -> None:
        self.last_export_time = datetime.now(timezone.utc).isoformat()

    def _has_changes(self, game_count: int, entry_count: int) -> bool:
        if self._snapshot is None:
            return game_count > 0 or entry_count > 0
        return game_count != self._snapshot.game_count or entry_count != self._snapshot.entry_count

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    def analyze_data_status(self) -> DataSyncStatus:
        """Compare the CSV directory against the database.

        A missing directory is a normal state and counts as "no CSV".
        """
        csv_dir_exists = self.csv_dir.is_dir()
        csv_files_exist = csv_dir_exists and has_csv_files(self.csv_dir)
        csv_game_count = count_csv_games(self.csv_dir) if csv_files_exist else 0
        csv_entry_count = count_csv_entries(self.csv_dir) if csv_files_exist else 0

        status = classify_data_status(
            csv_dir_exists,
            csv_files_exist,
            csv_game_count,
            csv_entry_count,
            self.db.get_game_count(),
            self.db.get_entry_count(),
        )
        logger.info(
            t(
                "logs.sync.startup_status",
                conflict=status.conflict_type.value if status.conflict_type else "none",
                recommendation=status.recommendation.value,
            )
        )
        return status

    def perform_auto_import(self) -> SyncResult:
        """Import the CSV directory without asking."""
        try:
            self.importer.import_directory(self.csv_dir)
        except _ACTION_ERRORS as e:
            logger.error(t("logs.sync.import_failed", error=str(e)))
            return SyncResult.failed(str(e))
        return SyncResult.ok()

    def perform_user_choice(self, choice: DataSyncChoice) -> SyncResult:
        """Run the action the user picked in the startup prompt.

        Returns:
            A cancelled result (nothing touched) if the choice is not
            confirmed, otherwise the action's outcome.
        """
        if not choice.confirmed:
            logger.info(t("logs.sync.cancelled"))
            return SyncResult.failed(CANCELLED_ERROR)

        action_name = getattr(choice.action, "value", choice.action)
        logger.info(t("logs.sync.user_choice", action=action_name))
        try:
            if choice.action is StartupAction.IMPORT_CSV:
                self.importer.import_directory(self.csv_dir)
            elif choice.action is StartupAction.KEEP_DB:
                pass
            elif choice.action is StartupAction.BACKUP_AND_IMPORT:
                self.exporter.export_directory(self.csv_dir)
                self.mark_last_export_time()
                self.importer.import_directory(self.csv_dir)
            else:
                return SyncResult.failed(INVALID_ACTION_ERROR)
        except _ACTION_ERRORS as e:
            logger.error(t("logs.sync.action_failed", action=action_name, error=str(e)))
            return SyncResult.failed(str(e))
        return SyncResult.ok()

    def get_conflict_message(self, status: DataSyncStatus) -> SyncMessage:
        return build_conflict_message(status)

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    def analyze_exit_status(self) -> ExitSyncStatus:
        """Compare the database against the snapshot and the CSV directory."""
        db_game_count = self.db.get_game_count()
        db_entry_count = self.db.get_entry_count()
        csv_game_count = count_csv_games(self.csv_dir)
        csv_entry_count = count_csv_entries(self.csv_dir)
        has_changes = self._has_changes(db_game_count, db_entry_count)

        status = ExitSyncStatus(
            has_changes=has_changes,
            last_export_time=self.last_export_time,
            db_game_count=db_game_count,
            db_entry_count=db_entry_count,
            csv_game_count=csv_game_count,
            csv_entry_count=csv_entry_count,
            recommendation=recommend_exit_action(
                has_changes, db_game_count, db_entry_count, csv_game_count, csv_entry_count
            ),
        )
        logger.info(
            t("logs.sync.exit_status", changes=has_changes, recommendation=status.recommendation.value)
        )
        return status

    def perform_exit_choice(self, choice: ExitSyncChoice) -> SyncResult:
        """Run the action the user picked in the shutdown prompt."""
        if not choice.confirmed:
            logger.info(t("logs.sync.cancelled"))
            return SyncResult.failed(CANCELLED_ERROR)

        if choice.action is ExitAction.EXPORT_CSV:
            return self.perform_auto_export()
        if choice.action is ExitAction.SKIP_EXPORT:
            logger.info(t("logs.sync.export_skipped"))
            return SyncResult.ok()
        return SyncResult.failed(INVALID_ACTION_ERROR)

    def perform_auto_export(self) -> SyncResult:
        """Write the whole database to the CSV directory."""
        try:
            self.exporter.export_directory(self.csv_dir)
        except _ACTION_ERRORS as e:
            logger.error(t("logs.sync.export_failed", error=str(e)))
            return SyncResult.failed(str(e))
        self.mark_last_export_time()
        return SyncResult.ok()

    def get_exit_message(self, status: ExitSyncStatus) -> SyncMessage:
        return build_exit_message(status)
