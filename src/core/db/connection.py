"""Database connection management.

Handles SQLite connection setup, PRAGMA configuration, and
context manager protocol.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any

logger = logging.getLogger("gamedict.database")

__all__ = ["ConnectionBase"]


class ConnectionBase:
    """Base class providing SQLite connection setup and lifecycle.

    Enables foreign keys (entries cascade with their game and block
    category deletion) and WAL mode. Calls _ensure_schema() which is
    provided by SchemaMixin via multiple inheritance.
    """

    SCHEMA_VERSION = 2

    conn: sqlite3.Connection
    db_path: Path

    def __init__(self, db_path: Path) -> None:
        """Open (and if needed create) the database.

        Args:
            db_path: Path to SQLite database file.
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self.conn = sqlite3.connect(str(self.db_path))
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA foreign_keys = ON")
        self.conn.execute("PRAGMA journal_mode = WAL")

        self._ensure_schema()
        logger.debug("Opened database %s", self.db_path)

    def _count(self, table: str, where: str = "", params: tuple[Any, ...] = ()) -> int:
        """Row count of one of the entity tables (optionally filtered)."""
        sql = f"SELECT COUNT(*) FROM {table}"
        if where:
            sql += f" WHERE {where}"
        return self.conn.execute(sql, params).fetchone()[0]

    def commit(self) -> None:
        """Commit current transaction."""
        self.conn.commit()

    def close(self) -> None:
        """Close database connection."""
        self.conn.close()

    def __enter__(self) -> ConnectionBase:
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.commit()
        self.close()
