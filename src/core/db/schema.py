"""Database schema creation and migrations.

Creates the schema from ``schema.sql`` on a fresh database, upgrades
databases written by older releases and seeds the default categories.

Version history:
    1: games/categories/entries without ``games.code`` (no version table)
    2: ``games.code`` natural key with unique index
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from src.core.db.models import now_iso
from src.utils.i18n import t

logger = logging.getLogger("gamedict.database")

__all__ = ["DEFAULT_CATEGORIES", "SchemaMixin"]

# (name, google_ime_name, ms_ime_name, atok_name)
DEFAULT_CATEGORIES: tuple[tuple[str, str, str, str], ...] = (
    ("名詞", "一般", "一般", "一般"),
    ("品詞なし", "一般", "一般", "一般"),
    ("人名", "人名", "人名", "人名"),
)

_SCHEMA_VERSION_DDL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at TEXT NOT NULL,
    description TEXT
)
"""


class SchemaMixin:
    """Mixin providing schema creation and migration logic.

    Requires ConnectionBase attributes: conn, SCHEMA_VERSION.
    """

    def _ensure_schema(self) -> None:
        """Create or migrate database schema, then seed categories."""
        current_version = self._get_schema_version()

        if current_version == 0:
            self._create_schema()
            self._set_schema_version(self.SCHEMA_VERSION, t("logs.db.schema_created"))
        elif current_version < self.SCHEMA_VERSION:
            self._migrate(current_version, self.SCHEMA_VERSION)

        self._seed_default_categories()

    def _get_schema_version(self) -> int:
        """Get current database schema version.

        A database that has the entity tables but no version table was
        written by the first release and counts as version 1.
        """
        try:
            cursor = self.conn.execute("SELECT MAX(version) FROM schema_version")
            result = cursor.fetchone()
            if result[0] is not None:
                return result[0]
        except sqlite3.OperationalError:
            pass

        legacy = self.conn.execute("SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'games'").fetchone()
        return 1 if legacy else 0

    def _set_schema_version(self, version: int, description: str) -> None:
        """Set database schema version."""
        self.conn.execute(_SCHEMA_VERSION_DDL)
        self.conn.execute(
            """
            INSERT OR REPLACE INTO schema_version (version, applied_at, description)
            VALUES (?, ?, ?)
            """,
            (version, now_iso(), description),
        )
        self.conn.commit()

    def _create_schema(self) -> None:
        """Create initial database schema from SQL file."""
        schema_path = Path(__file__).parent / "schema.sql"
        try:
            with open(schema_path, encoding="utf-8") as f:
                schema_sql = f.read()
        except FileNotFoundError:
            logger.error(t("logs.db.schema_not_found", path=str(schema_path)))
            raise

        try:
            self.conn.executescript(schema_sql)
            self.conn.commit()
            logger.info(t("logs.db.schema_created"))
        except sqlite3.Error as e:
            logger.error(t("logs.db.schema_error", error=str(e)))
            raise

    def _migrate(self, from_version: int, to_version: int) -> None:
        """Migrate database schema step by step.

        Args:
            from_version: Current schema version.
            to_version: Target schema version.
        """
        logger.info(t("logs.db.migrating", from_ver=from_version, to_ver=to_version))

        if from_version < 2:
            self._migrate_to_v2()
            self._set_schema_version(2, "games.code natural key")

    def _migrate_to_v2(self) -> None:
        """Add ``games.code`` and derive a unique code for every existing game."""
        columns = {row["name"] for row in self.conn.execute("PRAGMA table_info(games)")}
        if "code" not in columns:
            self.conn.execute("ALTER TABLE games ADD COLUMN code TEXT COLLATE NOCASE")

        rows = self.conn.execute("SELECT id, name FROM games WHERE code IS NULL OR code = '' ORDER BY id").fetchall()
        for row in rows:
            code = self.generate_unique_game_code(row["name"])
            self.conn.execute("UPDATE games SET code = ? WHERE id = ?", (code, row["id"]))

        self.conn.execute("CREATE UNIQUE INDEX IF NOT EXISTS idx_games_code ON games(code COLLATE NOCASE)")
        self.conn.commit()
        logger.info(t("logs.db.codes_backfilled", count=len(rows)))

    def _seed_default_categories(self) -> None:
        """Insert the default categories when the table is empty."""
        count = self.conn.execute("SELECT COUNT(*) FROM categories").fetchone()[0]
        if count:
            return

        now = now_iso()
        with self.conn:
            self.conn.executemany(
                """
                INSERT INTO categories (name, google_ime_name, ms_ime_name, atok_name, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                [(*category, now, now) for category in DEFAULT_CATEGORIES],
            )
        logger.info(t("logs.db.categories_seeded", count=len(DEFAULT_CATEGORIES)))
