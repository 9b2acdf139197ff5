"""Database data models and conversion functions.

Contains the row dataclasses (Game, Category, Entry, EntryWithDetails),
the IME vendor enum and the game-code helpers shared by the database and
the CSV codec.
"""

from __future__ import annotations

import re
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from src.utils.i18n import t

__all__ = [
    "Category",
    "DEFAULT_GAME_CODE",
    "DEFAULT_IME_CATEGORY",
    "Entry",
    "EntryWithDetails",
    "Game",
    "IMEVendor",
    "MAX_GAME_CODE_LENGTH",
    "category_from_row",
    "entry_from_row",
    "entry_with_details_from_row",
    "game_from_row",
    "generate_game_code_from_name",
    "now_iso",
    "validate_game_code",
]

MAX_GAME_CODE_LENGTH = 16

# Used when a name has no ASCII letters or digits at all (e.g. Japanese titles)
DEFAULT_GAME_CODE = "game"

# Generic label every IME understands ("general")
DEFAULT_IME_CATEGORY = "一般"

_GAME_CODE_PATTERN = re.compile(r"^[A-Za-z0-9]+$")
_NON_CODE_CHARS = re.compile(r"[^a-z0-9]")


def now_iso() -> str:
    """Current UTC time as ISO-8601 string (second precision)."""
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def validate_game_code(code: str | None) -> str | None:
    """Check a game code against the 1-16 alphanumeric rule.

    Args:
        code: Code to check.

    Returns:
        A translated error message, or None if the code is valid.
    """
    if not code:
        return t("errors.game_code.required")
    if len(code) > MAX_GAME_CODE_LENGTH:
        return t("errors.game_code.too_long", max=MAX_GAME_CODE_LENGTH)
    if not _GAME_CODE_PATTERN.match(code):
        return t("errors.game_code.invalid_chars")
    return None


def generate_game_code_from_name(name: str | None) -> str:
    """Derive a default code: lowercase, ``[a-z0-9]`` only, at most 16 chars.

    May return an empty string when the name has no usable characters.
    """
    if not name:
        return ""
    return _NON_CODE_CHARS.sub("", name.lower())[:MAX_GAME_CODE_LENGTH]


class IMEVendor(Enum):
    """Supported third-party IME dictionary formats."""

    GOOGLE = "google"
    MS = "ms"
    ATOK = "atok"


@dataclass(frozen=True)
class Game:
    """A dictionary project; ``code`` is its stable natural key."""

    id: int
    name: str
    code: str
    created_at: str
    updated_at: str


@dataclass(frozen=True)
class Category:
    """Part-of-speech like grouping with per-IME display names."""

    id: int
    name: str
    google_ime_name: str | None = None
    ms_ime_name: str | None = None
    atok_name: str | None = None
    created_at: str = ""
    updated_at: str = ""

    def vendor_label(self, vendor: IMEVendor) -> str:
        """Category label for a vendor export, falling back to the generic one."""
        value = {
            IMEVendor.GOOGLE: self.google_ime_name,
            IMEVendor.MS: self.ms_ime_name,
            IMEVendor.ATOK: self.atok_name,
        }[vendor]
        return value or DEFAULT_IME_CATEGORY


@dataclass(frozen=True)
class Entry:
    """Single dictionary word of a game."""

    id: int
    game_id: int
    category_id: int
    reading: str
    word: str
    description: str | None = None
    created_at: str = ""
    updated_at: str = ""


@dataclass(frozen=True)
class EntryWithDetails(Entry):
    """Entry joined with its game and category names (listing, search)."""

    game_name: str = ""
    category_name: str = ""


def game_from_row(row: sqlite3.Row) -> Game:
    return Game(
        id=row["id"],
        name=row["name"],
        code=row["code"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def category_from_row(row: sqlite3.Row) -> Category:
    return Category(
        id=row["id"],
        name=row["name"],
        google_ime_name=row["google_ime_name"],
        ms_ime_name=row["ms_ime_name"],
        atok_name=row["atok_name"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def entry_from_row(row: sqlite3.Row) -> Entry:
    return Entry(
        id=row["id"],
        game_id=row["game_id"],
        category_id=row["category_id"],
        reading=row["reading"],
        word=row["word"],
        description=row["description"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def entry_with_details_from_row(row: sqlite3.Row) -> EntryWithDetails:
    return EntryWithDetails(
        id=row["id"],
        game_id=row["game_id"],
        category_id=row["category_id"],
        reading=row["reading"],
        word=row["word"],
        description=row["description"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        game_name=row["game_name"],
        category_name=row["category_name"],
    )
