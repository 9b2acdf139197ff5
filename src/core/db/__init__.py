"""Database package.

All mixins compose into the Database class via multiple inheritance.
The MRO (Method Resolution Order) ensures ConnectionBase.__init__
runs first, then SchemaMixin._ensure_schema() creates/migrates
the schema and seeds the default categories.
"""

from __future__ import annotations

from src.core.db.category_queries import CategoryQueryMixin
from src.core.db.connection import ConnectionBase
from src.core.db.entry_queries import EntryQueryMixin
from src.core.db.game_queries import GameQueryMixin
from src.core.db.models import (
    DEFAULT_IME_CATEGORY,
    Category,
    Entry,
    EntryWithDetails,
    Game,
    IMEVendor,
    generate_game_code_from_name,
    validate_game_code,
)
from src.core.db.schema import DEFAULT_CATEGORIES, SchemaMixin

__all__ = [
    "Category",
    "DEFAULT_CATEGORIES",
    "DEFAULT_IME_CATEGORY",
    "Database",
    "Entry",
    "EntryWithDetails",
    "Game",
    "IMEVendor",
    "generate_game_code_from_name",
    "validate_game_code",
]


class Database(
    SchemaMixin,
    GameQueryMixin,
    CategoryQueryMixin,
    EntryQueryMixin,
    ConnectionBase,
):
    """Main database class composing all query mixins.

    Inherits connection management from ConnectionBase,
    schema handling from SchemaMixin, and the per-entity
    operations from the remaining mixins.
    """

    pass
