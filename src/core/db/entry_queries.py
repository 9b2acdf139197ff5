"""Entry CRUD operations and search.

Every entry belongs to exactly one game and one category; both
references are enforced by SQLite foreign keys, so invalid ids surface
as ``sqlite3.IntegrityError`` from the write that used them.
"""

from __future__ import annotations

import logging
from typing import Any

from src.core.db.models import Entry, EntryWithDetails, entry_from_row, entry_with_details_from_row, now_iso
from src.utils.i18n import t

logger = logging.getLogger("gamedict.database")

__all__ = ["EntryQueryMixin"]

_UPDATABLE_FIELDS = frozenset({"category_id", "reading", "word", "description"})

_DETAILS_SELECT = """
    SELECT e.*, g.name AS game_name, c.name AS category_name
    FROM entries e
    JOIN games g ON e.game_id = g.id
    JOIN categories c ON e.category_id = c.id
"""


class EntryQueryMixin:
    """Mixin providing entry operations.

    Requires ConnectionBase attributes: conn.
    """

    def get_all_entries(self) -> list[Entry]:
        rows = self.conn.execute("SELECT * FROM entries ORDER BY reading ASC").fetchall()
        return [entry_from_row(row) for row in rows]

    def get_entry(self, entry_id: int) -> Entry | None:
        row = self.conn.execute("SELECT * FROM entries WHERE id = ?", (entry_id,)).fetchone()
        return entry_from_row(row) if row else None

    def get_entries_by_game(self, game_id: int) -> list[Entry]:
        """Entries of one game ordered by reading."""
        rows = self.conn.execute(
            "SELECT * FROM entries WHERE game_id = ? ORDER BY reading ASC, id ASC", (game_id,)
        ).fetchall()
        return [entry_from_row(row) for row in rows]

    def get_entries_with_details(self, game_id: int | None = None) -> list[EntryWithDetails]:
        sql = _DETAILS_SELECT
        params: tuple[Any, ...] = ()
        if game_id is not None:
            sql += " WHERE e.game_id = ?"
            params = (game_id,)
        sql += " ORDER BY e.reading ASC"
        return [entry_with_details_from_row(row) for row in self.conn.execute(sql, params)]

    def get_entry_count(self, game_id: int | None = None) -> int:
        if game_id is None:
            return self._count("entries")
        return self._count("entries", "game_id = ?", (game_id,))

    def find_entry(self, game_id: int, category_id: int, reading: str, word: str) -> Entry | None:
        """Look up an entry by its natural key (game, category, reading, word)."""
        row = self.conn.execute(
            """
            SELECT * FROM entries
            WHERE game_id = ? AND category_id = ? AND reading = ? AND word = ?
            LIMIT 1
            """,
            (game_id, category_id, reading, word),
        ).fetchone()
        return entry_from_row(row) if row else None

    def create_entry(
        self,
        game_id: int,
        category_id: int,
        reading: str,
        word: str,
        description: str | None = None,
    ) -> Entry:
        """Create an entry.

        Raises:
            ValueError: If reading or word are empty.
            sqlite3.IntegrityError: If game or category do not exist.
        """
        if not reading or not word:
            raise ValueError(t("errors.entry.reading_word_required"))

        now = now_iso()
        with self.conn:
            cursor = self.conn.execute(
                """
                INSERT INTO entries (game_id, category_id, reading, word, description, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (game_id, category_id, reading, word, description or None, now, now),
            )
        return self.get_entry(cursor.lastrowid)

    def update_entry(self, entry_id: int, **fields: Any) -> Entry | None:
        """Partially update an entry (the owning game cannot change).

        Returns:
            The updated entry, or None if it does not exist.
        """
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(t("errors.db.unknown_fields", fields=", ".join(sorted(unknown))))
        if not fields:
            return self.get_entry(entry_id)

        for required in ("reading", "word"):
            if required in fields and not fields[required]:
                raise ValueError(t("errors.entry.reading_word_required"))
        if "description" in fields:
            fields["description"] = fields["description"] or None

        set_clause = ", ".join(f"{column} = ?" for column in fields)
        with self.conn:
            cursor = self.conn.execute(
                f"UPDATE entries SET {set_clause}, updated_at = ? WHERE id = ?",
                (*fields.values(), now_iso(), entry_id),
            )

        if cursor.rowcount == 0:
            return None
        return self.get_entry(entry_id)

    def delete_entry(self, entry_id: int) -> bool:
        with self.conn:
            cursor = self.conn.execute("DELETE FROM entries WHERE id = ?", (entry_id,))
        return cursor.rowcount > 0

    def delete_entries_by_game(self, game_id: int) -> int:
        """Remove all entries of a game; returns the number removed."""
        with self.conn:
            cursor = self.conn.execute("DELETE FROM entries WHERE game_id = ?", (game_id,))
        return cursor.rowcount

    def search_entries(self, text: str, game_id: int | None = None) -> list[EntryWithDetails]:
        """Substring search over reading, word and description.

        Args:
            text: Text to look for.
            game_id: Restrict the search to one game.
        """
        pattern = f"%{text}%"
        sql = _DETAILS_SELECT + " WHERE (e.reading LIKE ? OR e.word LIKE ? OR e.description LIKE ?)"
        params: list[Any] = [pattern, pattern, pattern]
        if game_id is not None:
            sql += " AND e.game_id = ?"
            params.append(game_id)
        sql += " ORDER BY e.reading ASC"
        return [entry_with_details_from_row(row) for row in self.conn.execute(sql, params)]
