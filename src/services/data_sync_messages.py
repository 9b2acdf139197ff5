# src/services/data_sync_messages.py

"""Prompt texts for the reconciliation dialogs.

Pure functions: a status object goes in, a translated SyncMessage comes
out. Each prompt only offers the actions that make sense for its
situation; a missing CSV directory never offers a plain import.
"""

from __future__ import annotations

from src.services.data_sync_models import (
    ConflictType,
    DataSyncStatus,
    ExitAction,
    ExitRecommendation,
    ExitSyncStatus,
    StartupAction,
    SyncMessage,
    SyncOption,
)
from src.utils.i18n import t

__all__ = ["build_conflict_message", "build_exit_message"]

# (action, i18n option key) per conflict type
_STARTUP_OPTIONS: dict[ConflictType, list[tuple[StartupAction, str]]] = {
    ConflictType.CSV_MISSING: [
        (StartupAction.KEEP_DB, "keep_db"),
        (StartupAction.BACKUP_AND_IMPORT, "backup_only"),
    ],
    ConflictType.DB_HAS_MORE_DATA: [
        (StartupAction.IMPORT_CSV, "import_csv_lossy"),
        (StartupAction.KEEP_DB, "keep_db"),
        (StartupAction.BACKUP_AND_IMPORT, "backup_and_import"),
    ],
    ConflictType.MIXED_DATA: [
        (StartupAction.IMPORT_CSV, "import_csv"),
        (StartupAction.KEEP_DB, "keep_db"),
        (StartupAction.BACKUP_AND_IMPORT, "backup_and_import"),
    ],
}

_EXIT_CHANGED_OPTIONS = [
    (ExitAction.EXPORT_CSV, "export_and_quit"),
    (ExitAction.SKIP_EXPORT, "quit_without_saving"),
]
_EXIT_BACKUP_OPTIONS = [
    (ExitAction.EXPORT_CSV, "save_csv"),
    (ExitAction.SKIP_EXPORT, "skip"),
]


def _options(pairs: list[tuple[StartupAction | ExitAction, str]]) -> list[SyncOption]:
    return [
        SyncOption(
            label=t(f"sync.options.{key}.label"),
            action=action,
            description=t(f"sync.options.{key}.description"),
        )
        for action, key in pairs
    ]


def build_conflict_message(status: DataSyncStatus) -> SyncMessage:
    """Prompt for a startup conflict.

    Args:
        status: Result of the startup analysis.

    Returns:
        Title, body with the four counts and the valid options. Statuses
        without a conflict get a neutral message and no options.
    """
    counts = {
        "csv_games": status.csv_game_count,
        "csv_entries": status.csv_entry_count,
        "db_games": status.db_game_count,
        "db_entries": status.db_entry_count,
    }
    conflict = status.conflict_type
    if conflict not in _STARTUP_OPTIONS:
        return SyncMessage(title=t("sync.startup.default.title"), message=t("sync.startup.default.message"))

    return SyncMessage(
        title=t(f"sync.startup.{conflict.value}.title"),
        message=t(f"sync.startup.{conflict.value}.message", **counts),
        options=_options(_STARTUP_OPTIONS[conflict]),
    )


def build_exit_message(status: ExitSyncStatus) -> SyncMessage:
    """Prompt shown when the application closes."""
    counts = {
        "csv_games": status.csv_game_count,
        "csv_entries": status.csv_entry_count,
        "db_games": status.db_game_count,
        "db_entries": status.db_entry_count,
    }
    if status.has_changes:
        return SyncMessage(
            title=t("sync.exit.changed.title"),
            message=t("sync.exit.changed.message", **counts),
            options=_options(_EXIT_CHANGED_OPTIONS),
        )
    if status.recommendation is ExitRecommendation.AUTO_EXPORT:
        return SyncMessage(
            title=t("sync.exit.backup.title"),
            message=t("sync.exit.backup.message", **counts),
            options=_options(_EXIT_BACKUP_OPTIONS),
        )
    return SyncMessage(title=t("sync.exit.unchanged.title"), message=t("sync.exit.unchanged.message"))
