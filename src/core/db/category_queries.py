"""Category CRUD operations.

Categories are shared by all games. Deleting a category is refused by
the database (ON DELETE RESTRICT) while entries still reference it.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any

from src.core.db.models import Category, category_from_row, now_iso
from src.utils.i18n import t

logger = logging.getLogger("gamedict.database")

__all__ = ["CategoryQueryMixin"]

_UPDATABLE_FIELDS = frozenset({"name", "google_ime_name", "ms_ime_name", "atok_name"})


class CategoryQueryMixin:
    """Mixin providing category operations.

    Requires ConnectionBase attributes: conn.
    """

    def get_all_categories(self) -> list[Category]:
        rows = self.conn.execute("SELECT * FROM categories ORDER BY name ASC").fetchall()
        return [category_from_row(row) for row in rows]

    def get_category(self, category_id: int) -> Category | None:
        row = self.conn.execute("SELECT * FROM categories WHERE id = ?", (category_id,)).fetchone()
        return category_from_row(row) if row else None

    def get_category_by_name(self, name: str) -> Category | None:
        row = self.conn.execute("SELECT * FROM categories WHERE name = ? ORDER BY id LIMIT 1", (name,)).fetchone()
        return category_from_row(row) if row else None

    def get_category_count(self) -> int:
        return self._count("categories")

    def create_category(
        self,
        name: str,
        google_ime_name: str | None = None,
        ms_ime_name: str | None = None,
        atok_name: str | None = None,
    ) -> Category:
        """Create a category.

        Vendor names left empty are stored as NULL; exports then use the
        generic label.

        Raises:
            ValueError: If the name is empty or already exists.
        """
        name = (name or "").strip()
        if not name:
            raise ValueError(t("errors.category.name_required"))

        now = now_iso()
        try:
            with self.conn:
                cursor = self.conn.execute(
                    """
                    INSERT INTO categories (name, google_ime_name, ms_ime_name, atok_name, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (name, google_ime_name or None, ms_ime_name or None, atok_name or None, now, now),
                )
        except sqlite3.IntegrityError as e:
            raise ValueError(t("errors.category.duplicate_name", name=name)) from e

        return self.get_category(cursor.lastrowid)

    def insert_category_with_id(
        self,
        category_id: int,
        name: str,
        google_ime_name: str | None = None,
        ms_ime_name: str | None = None,
        atok_name: str | None = None,
    ) -> Category:
        """Insert a category keeping a given id (manifest import).

        Raises:
            sqlite3.IntegrityError: If id or name are taken.
        """
        now = now_iso()
        with self.conn:
            self.conn.execute(
                """
                INSERT INTO categories (id, name, google_ime_name, ms_ime_name, atok_name, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (category_id, name, google_ime_name or None, ms_ime_name or None, atok_name or None, now, now),
            )
        return self.get_category(category_id)

    def update_category(self, category_id: int, **fields: Any) -> Category | None:
        """Partially update a category.

        Returns:
            The updated category, or None if it does not exist.
        """
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(t("errors.db.unknown_fields", fields=", ".join(sorted(unknown))))
        if not fields:
            return self.get_category(category_id)

        if "name" in fields:
            fields["name"] = (fields["name"] or "").strip()
            if not fields["name"]:
                raise ValueError(t("errors.category.name_required"))

        set_clause = ", ".join(f"{column} = ?" for column in fields)
        values = [value or None for value in fields.values()]
        try:
            with self.conn:
                cursor = self.conn.execute(
                    f"UPDATE categories SET {set_clause}, updated_at = ? WHERE id = ?",
                    (*values, now_iso(), category_id),
                )
        except sqlite3.IntegrityError as e:
            raise ValueError(t("errors.category.duplicate_name", name=fields.get("name", ""))) from e

        if cursor.rowcount == 0:
            return None
        return self.get_category(category_id)

    def delete_category(self, category_id: int) -> bool:
        """Delete an unused category.

        Raises:
            sqlite3.IntegrityError: While entries still reference it.
        """
        with self.conn:
            cursor = self.conn.execute("DELETE FROM categories WHERE id = ?", (category_id,))
        return cursor.rowcount > 0
