"""Layout of the Git-managed CSV directory.

One directory holds:

* ``games.csv`` - manifest of all games
* ``categories.csv`` - manifest of all categories
* ``game-{code}.csv`` - entries of one game, preceded by a comment line
  ``# Game: {name} (Code: {code})``

Files written by the first release used ``# Game: {name} (ID: {id})``;
that comment is still understood on import.

The counting helpers never raise for missing files: an absent directory
simply counts as empty.
"""

from __future__ import annotations

import csv
import logging
import re
from dataclasses import dataclass
from pathlib import Path

__all__ = [
    "CATEGORIES_FILE",
    "CATEGORIES_HEADER",
    "COMMENT_PREFIX",
    "ENTRIES_HEADER",
    "GAME_FILE_PREFIX",
    "GAMES_FILE",
    "GAMES_HEADER",
    "GameComment",
    "code_from_file_name",
    "count_csv_entries",
    "count_csv_games",
    "format_game_comment",
    "game_file_name",
    "has_csv_files",
    "is_game_file",
    "list_game_files",
    "parse_game_comment",
]

logger = logging.getLogger("gamedict.csv_format")

GAMES_FILE = "games.csv"
CATEGORIES_FILE = "categories.csv"
GAME_FILE_PREFIX = "game-"
CSV_SUFFIX = ".csv"

GAMES_HEADER: tuple[str, ...] = ("id", "name", "code", "created_at", "updated_at")
CATEGORIES_HEADER: tuple[str, ...] = ("id", "name", "google_ime_name", "ms_ime_name", "atok_name")
ENTRIES_HEADER: tuple[str, ...] = ("category_name", "reading", "word", "description")

COMMENT_PREFIX = "#"

_GAME_COMMENT = re.compile(r"^#\s*Game:\s*(?P<name>.+)\s+\(Code:\s*(?P<code>[A-Za-z0-9]+)\)\s*$")
_LEGACY_GAME_COMMENT = re.compile(r"^#\s*Game:\s*(?P<name>.+)\s+\(ID:\s*(?P<id>\d+)\)\s*$")


@dataclass(frozen=True)
class GameComment:
    """Game identity recovered from the first line of a per-game file."""

    name: str
    code: str | None = None
    legacy_id: int | None = None


def game_file_name(code: str) -> str:
    return f"{GAME_FILE_PREFIX}{code}{CSV_SUFFIX}"


def is_game_file(file_name: str) -> bool:
    return file_name.startswith(GAME_FILE_PREFIX) and file_name.endswith(CSV_SUFFIX)


def code_from_file_name(path: Path) -> str | None:
    """Return the ``{code}`` part of ``game-{code}.csv``, if any."""
    if not is_game_file(path.name):
        return None
    code = path.name[len(GAME_FILE_PREFIX) : -len(CSV_SUFFIX)]
    return code or None


def format_game_comment(name: str, code: str) -> str:
    return f"{COMMENT_PREFIX} Game: {name} (Code: {code})"


def parse_game_comment(line: str) -> GameComment | None:
    """Parse the leading comment of a per-game file.

    Tries the current ``(Code: ...)`` syntax first, then the legacy
    ``(ID: ...)`` syntax.

    Returns:
        The recovered identity, or None if the line is no game comment.
    """
    line = line.strip()
    match = _GAME_COMMENT.match(line)
    if match:
        return GameComment(name=match.group("name").strip(), code=match.group("code"))
    match = _LEGACY_GAME_COMMENT.match(line)
    if match:
        return GameComment(name=match.group("name").strip(), legacy_id=int(match.group("id")))
    return None


def list_game_files(directory: Path) -> list[Path]:
    """All per-game files of a directory, sorted by name."""
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if p.is_file() and is_game_file(p.name))


def has_csv_files(directory: Path) -> bool:
    """True if the directory holds a games manifest or any per-game file."""
    if not directory.is_dir():
        return False
    return (directory / GAMES_FILE).is_file() or bool(list_game_files(directory))


def _read_records(path: Path) -> list[list[str]]:
    """Non-blank CSV records of a file, without a leading comment line."""
    try:
        with open(path, newline="", encoding="utf-8-sig") as fh:
            records = [row for row in csv.reader(fh) if any(cell.strip() for cell in row)]
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        logger.warning("Could not read %s for counting: %s", path.name, e)
        return []
    if records and records[0][0].lstrip().startswith(COMMENT_PREFIX):
        records = records[1:]
    return records


def count_csv_games(directory: Path) -> int:
    """Number of data rows in ``games.csv`` (0 if the file is absent)."""
    games_file = directory / GAMES_FILE
    if not games_file.is_file():
        return 0
    return max(0, len(_read_records(games_file)) - 1)


def count_csv_entries(directory: Path) -> int:
    """Number of entry records over all per-game files.

    Blank lines, the comment line and the header are not counted; a
    quoted value spanning several lines counts once.
    """
    return sum(max(0, len(_read_records(path)) - 1) for path in list_game_files(directory))
