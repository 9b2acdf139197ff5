"""Game CRUD operations.

Games are identified by the store-assigned ``id`` and by two natural
keys: the unique ``name`` and the unique alphanumeric ``code`` used for
CSV file names.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any

from src.core.db.models import (
    DEFAULT_GAME_CODE,
    MAX_GAME_CODE_LENGTH,
    Game,
    game_from_row,
    generate_game_code_from_name,
    now_iso,
    validate_game_code,
)
from src.utils.i18n import t

logger = logging.getLogger("gamedict.database")

__all__ = ["GameQueryMixin"]

_UPDATABLE_FIELDS = frozenset({"name", "code"})


class GameQueryMixin:
    """Mixin providing game operations.

    Requires ConnectionBase attributes: conn.
    """

    def get_all_games(self) -> list[Game]:
        """All games ordered by name."""
        rows = self.conn.execute("SELECT * FROM games ORDER BY name ASC").fetchall()
        return [game_from_row(row) for row in rows]

    def get_game(self, game_id: int) -> Game | None:
        row = self.conn.execute("SELECT * FROM games WHERE id = ?", (game_id,)).fetchone()
        return game_from_row(row) if row else None

    def get_game_by_name(self, name: str) -> Game | None:
        """Exact (case-sensitive) name lookup; first match by id wins."""
        row = self.conn.execute("SELECT * FROM games WHERE name = ? ORDER BY id LIMIT 1", (name,)).fetchone()
        return game_from_row(row) if row else None

    def get_game_by_code(self, code: str) -> Game | None:
        """Code lookup (codes compare case-insensitively)."""
        row = self.conn.execute("SELECT * FROM games WHERE code = ? LIMIT 1", (code,)).fetchone()
        return game_from_row(row) if row else None

    def get_game_count(self) -> int:
        return self._count("games")

    def generate_unique_game_code(self, name: str) -> str:
        """Derive a code from ``name`` that no game uses yet.

        On collision a numeric suffix (2, 3, ...) is appended and the base
        is shortened so the result never exceeds 16 characters.

        Args:
            name: Game name to derive the code from.

        Returns:
            A valid, currently unused game code.
        """
        base = generate_game_code_from_name(name) or DEFAULT_GAME_CODE
        candidate = base
        suffix = 2
        while self.get_game_by_code(candidate) is not None:
            tail = str(suffix)
            candidate = base[: MAX_GAME_CODE_LENGTH - len(tail)] + tail
            suffix += 1
        return candidate

    def create_game(self, name: str, code: str | None = None) -> Game:
        """Create a game.

        Args:
            name: Unique, non-empty display name.
            code: Unique code (1-16 alphanumerics). Derived from the name
                when omitted.

        Returns:
            The created game.

        Raises:
            ValueError: On an empty name, an invalid code or when name or
                code are already taken.
        """
        name = self._checked_name(name)
        if code:
            self._check_code(code)
        else:
            code = self.generate_unique_game_code(name)

        now = now_iso()
        try:
            with self.conn:
                cursor = self.conn.execute(
                    "INSERT INTO games (name, code, created_at, updated_at) VALUES (?, ?, ?, ?)",
                    (name, code, now, now),
                )
        except sqlite3.IntegrityError as e:
            raise ValueError(self._duplicate_message(name, code)) from e

        logger.debug("Created game %s (%s)", name, code)
        return self.get_game(cursor.lastrowid)

    def insert_game_with_id(
        self,
        game_id: int,
        name: str,
        code: str,
        created_at: str | None = None,
        updated_at: str | None = None,
    ) -> Game:
        """Insert a game keeping a given id (manifest import).

        Raises:
            ValueError: If the code is invalid.
            sqlite3.IntegrityError: If id, name or code are taken.
        """
        self._check_code(code)
        now = now_iso()
        with self.conn:
            self.conn.execute(
                "INSERT INTO games (id, name, code, created_at, updated_at) VALUES (?, ?, ?, ?, ?)",
                (game_id, name, code, created_at or now, updated_at or created_at or now),
            )
        return self.get_game(game_id)

    def update_game(self, game_id: int, **fields: Any) -> Game | None:
        """Update name and/or code of a game.

        Returns:
            The updated game, or None if ``game_id`` does not exist.

        Raises:
            ValueError: On unknown fields, invalid values or duplicates.
        """
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(t("errors.db.unknown_fields", fields=", ".join(sorted(unknown))))
        if not fields:
            return self.get_game(game_id)

        if "name" in fields:
            fields["name"] = self._checked_name(fields["name"])
        if "code" in fields:
            self._check_code(fields["code"])

        set_clause = ", ".join(f"{column} = ?" for column in fields)
        try:
            with self.conn:
                cursor = self.conn.execute(
                    f"UPDATE games SET {set_clause}, updated_at = ? WHERE id = ?",
                    (*fields.values(), now_iso(), game_id),
                )
        except sqlite3.IntegrityError as e:
            raise ValueError(self._duplicate_message(fields.get("name", ""), fields.get("code", ""))) from e

        if cursor.rowcount == 0:
            return None
        return self.get_game(game_id)

    def delete_game(self, game_id: int) -> bool:
        """Delete a game together with all of its entries (one transaction).

        Returns:
            True if a game was removed.
        """
        with self.conn:
            entry_count = self._count("entries", "game_id = ?", (game_id,))
            cursor = self.conn.execute("DELETE FROM games WHERE id = ?", (game_id,))

        if cursor.rowcount:
            logger.info(t("logs.db.game_deleted", id=game_id, entries=entry_count))
        return cursor.rowcount > 0

    @staticmethod
    def _checked_name(name: str | None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValueError(t("errors.game.name_required"))
        return name

    @staticmethod
    def _check_code(code: str | None) -> None:
        error = validate_game_code(code)
        if error:
            raise ValueError(error)

    def _duplicate_message(self, name: str, code: str) -> str:
        if name and self.get_game_by_name(name) is not None:
            return t("errors.game.duplicate_name", name=name)
        return t("errors.game.duplicate_code", code=code)
