# src/services/data_sync_models.py

"""Data models for CSV/database reconciliation.

Status objects produced by the startup and shutdown analysis, the user
choices fed back into the service and the result/message types handed to
the presentation layer. Enum values are the strings stored in logs and
compared by the UI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

__all__ = [
    "CANCELLED_ERROR",
    "ConflictType",
    "DataSnapshot",
    "DataSyncChoice",
    "DataSyncStatus",
    "ExitAction",
    "ExitRecommendation",
    "ExitSyncChoice",
    "ExitSyncStatus",
    "INVALID_ACTION_ERROR",
    "StartupAction",
    "StartupRecommendation",
    "SyncMessage",
    "SyncOption",
    "SyncResult",
]

# Fixed strings so callers can tell an abort from a fault
CANCELLED_ERROR = "User cancelled operation"
INVALID_ACTION_ERROR = "Invalid choice action"


class ConflictType(Enum):
    """Outcome of the startup classification."""

    CSV_MISSING = "csv_missing"
    DB_HAS_MORE_DATA = "db_has_more_data"
    MIXED_DATA = "mixed_data"
    SAFE = "safe"


class StartupRecommendation(Enum):
    AUTO_IMPORT = "auto_import"
    USER_CONFIRM = "user_confirm"
    SKIP_IMPORT = "skip_import"


class ExitRecommendation(Enum):
    AUTO_EXPORT = "auto_export"
    USER_CONFIRM = "user_confirm"
    SKIP_EXPORT = "skip_export"


class StartupAction(Enum):
    """Actions the user can pick when a startup conflict is detected."""

    IMPORT_CSV = "import_csv"
    KEEP_DB = "keep_db"
    BACKUP_AND_IMPORT = "backup_and_import"


class ExitAction(Enum):
    EXPORT_CSV = "export_csv"
    SKIP_EXPORT = "skip_export"


@dataclass(frozen=True)
class DataSyncStatus:
    """Startup comparison of the CSV directory against the database.

    Attributes:
        csv_dir_exists: The CSV directory exists.
        csv_files_exist: A games manifest or a per-game file exists.
        csv_game_count: Data rows in the games manifest.
        csv_entry_count: Entry rows over all per-game files.
        db_game_count: Games in the database.
        db_entry_count: Entries in the database.
        has_conflict: The user has to decide before anything is imported.
        conflict_type: Classification result.
        recommendation: What the caller should do next.
    """

    csv_dir_exists: bool
    csv_files_exist: bool
    csv_game_count: int
    csv_entry_count: int
    db_game_count: int
    db_entry_count: int
    has_conflict: bool
    conflict_type: ConflictType | None
    recommendation: StartupRecommendation


@dataclass(frozen=True)
class ExitSyncStatus:
    """Shutdown comparison of the database against the construction snapshot."""

    has_changes: bool
    last_export_time: str | None
    db_game_count: int
    db_entry_count: int
    csv_game_count: int
    csv_entry_count: int
    recommendation: ExitRecommendation


@dataclass(frozen=True)
class DataSyncChoice:
    action: StartupAction
    confirmed: bool = True


@dataclass(frozen=True)
class ExitSyncChoice:
    action: ExitAction
    confirmed: bool = True


@dataclass(frozen=True)
class DataSnapshot:
    """Game and entry counts taken when the service starts."""

    game_count: int
    entry_count: int


@dataclass(frozen=True)
class SyncResult:
    """Outcome of a reconciliation action; never raised, always returned."""

    success: bool
    error: str | None = None

    @property
    def cancelled(self) -> bool:
        return not self.success and self.error == CANCELLED_ERROR

    @classmethod
    def ok(cls) -> SyncResult:
        return cls(success=True)

    @classmethod
    def failed(cls, error: str) -> SyncResult:
        return cls(success=False, error=error)


@dataclass(frozen=True)
class SyncOption:
    """One button of a reconciliation prompt."""

    label: str
    action: StartupAction | ExitAction
    description: str


@dataclass(frozen=True)
class SyncMessage:
    """Title, body and the actions offered for a reconciliation prompt."""

    title: str
    message: str
    options: list[SyncOption] = field(default_factory=list)
