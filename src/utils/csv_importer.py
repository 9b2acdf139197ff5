# src/utils/csv_importer.py

"""Imports the Git-managed CSV directory into the database.

Import is additive and idempotent: existing games and categories are
reused, and an entry whose (game, category, reading, word) tuple already
exists is skipped, so importing the same directory twice changes nothing.
"""

from __future__ import annotations

import csv
import itertools
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

from src.core.db.models import DEFAULT_IME_CATEGORY, Category, Game, validate_game_code
from src.utils.csv_format import (
    CATEGORIES_FILE,
    COMMENT_PREFIX,
    GAME_FILE_PREFIX,
    GAMES_FILE,
    GameComment,
    code_from_file_name,
    list_game_files,
    parse_game_comment,
)
from src.utils.i18n import t

if TYPE_CHECKING:
    from src.core.db import Database

logger = logging.getLogger("gamedict.csv_importer")

__all__ = ["FALLBACK_CATEGORY", "CSVImporter", "ImportStats"]

# Category used for rows with an empty category column ("no part of speech")
FALLBACK_CATEGORY = "品詞なし"


@dataclass
class ImportStats:
    """Counters collected while importing."""

    files_processed: int = 0
    games_created: int = 0
    categories_created: int = 0
    entries_created: int = 0
    entries_skipped: int = 0
    rows_rejected: int = 0

    def merge(self, other: ImportStats) -> ImportStats:
        """Add the counters of ``other`` to this instance and return it."""
        for f in fields(self):
            setattr(self, f.name, getattr(self, f.name) + getattr(other, f.name))
        return self


class CSVImporter:
    """Reads manifests and per-game files written by CSVExporter."""

    def __init__(self, database: Database) -> None:
        self.db = database
        self._category_cache: dict[str, Category] = {}

    def import_directory(self, directory: Path) -> ImportStats:
        """Import a whole CSV directory.

        Order: games manifest, categories manifest, then every
        ``game-*.csv`` sorted by file name. An empty directory is a no-op.

        Args:
            directory: The CSV directory.

        Returns:
            Summed counters of all files.

        Raises:
            FileNotFoundError: If the directory does not exist.
            ValueError: If a file has an unusable header or is not UTF-8.
        """
        if not directory.is_dir():
            raise FileNotFoundError(t("errors.csv.directory_not_found", path=str(directory)))

        self._category_cache.clear()
        stats = ImportStats()

        games_file = directory / GAMES_FILE
        if games_file.is_file():
            stats.merge(self._import_games_manifest(games_file))

        categories_file = directory / CATEGORIES_FILE
        if categories_file.is_file():
            stats.merge(self._import_categories_manifest(categories_file))

        for path in list_game_files(directory):
            stats.merge(self.import_file(path))

        logger.info(
            t(
                "logs.csv.imported_directory",
                path=str(directory),
                files=stats.files_processed,
                games=stats.games_created,
                categories=stats.categories_created,
                entries=stats.entries_created,
                skipped=stats.entries_skipped,
            )
        )
        return stats

    def import_file(self, path: Path) -> ImportStats:
        """Import the entries of a single per-game file.

        The game is taken from the leading comment line, or derived from
        the file name when the comment is missing.

        Args:
            path: A ``game-{code}.csv`` file (any CSV with the entries header
                is accepted).

        Returns:
            Counters for this file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the header lacks ``reading`` or ``word``.
        """
        if not path.is_file():
            raise FileNotFoundError(t("errors.csv.file_not_found", path=str(path)))

        stats = ImportStats(files_processed=1)

        with open(path, newline="", encoding="utf-8-sig") as fh:
            # Blank lines and the optional game comment precede the header
            first, consumed = self._next_content_line(fh)
            comment = None
            if first.lstrip().startswith(COMMENT_PREFIX):
                comment = parse_game_comment(first)
                first, skipped = self._next_content_line(fh)
                consumed += 1 + skipped

            reader = csv.DictReader(itertools.chain([first], fh))
            if not reader.fieldnames:
                logger.debug("No rows in %s", path.name)
                return stats
            if not {"reading", "word"} <= set(reader.fieldnames):
                raise ValueError(t("errors.csv.invalid_header", file=path.name))

            game = self._resolve_game(path, comment, stats)

            for row in reader:
                reading = row.get("reading") or ""
                word = row.get("word") or ""
                if not reading.strip() or not word.strip():
                    logger.warning(t("logs.csv.row_rejected", file=path.name, line=consumed + reader.line_num))
                    stats.rows_rejected += 1
                    continue

                category_name = (row.get("category_name") or "").strip() or FALLBACK_CATEGORY
                category = self._resolve_category(category_name, stats)

                if self.db.find_entry(game.id, category.id, reading, word) is not None:
                    stats.entries_skipped += 1
                    continue

                self.db.create_entry(game.id, category.id, reading, word, row.get("description") or None)
                stats.entries_created += 1

        logger.info(
            t(
                "logs.csv.imported_file",
                file=path.name,
                game=game.name,
                created=stats.entries_created,
                skipped=stats.entries_skipped,
            )
        )
        return stats

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    @staticmethod
    def _next_content_line(fh: TextIO) -> tuple[str, int]:
        """Read up to the next non-blank line; returns it and the blank lines skipped."""
        skipped = 0
        line = fh.readline()
        while line and not line.strip():
            skipped += 1
            line = fh.readline()
        return line, skipped

    def _resolve_game(self, path: Path, comment: GameComment | None, stats: ImportStats) -> Game:
        """Find or create the game a per-game file belongs to."""
        if comment is not None:
            name = comment.name
            preferred_code = comment.code
        else:
            code = code_from_file_name(path)
            if code:
                existing = self.db.get_game_by_code(code)
                if existing is not None:
                    return existing
            name = path.stem[len(GAME_FILE_PREFIX) :] if code else path.stem
            preferred_code = code
            logger.warning(t("logs.csv.comment_missing", file=path.name, name=name))

        game = self.db.get_game_by_name(name)
        if game is not None:
            return game

        game = self.db.create_game(name, self._usable_code(name, preferred_code))
        stats.games_created += 1
        return game

    def _usable_code(self, name: str, code: str | None) -> str:
        """Keep ``code`` if valid and free, otherwise derive a unique one."""
        if code and validate_game_code(code) is None and self.db.get_game_by_code(code) is None:
            return code
        return self.db.generate_unique_game_code(name)

    def _resolve_category(self, name: str, stats: ImportStats) -> Category:
        category = self._category_cache.get(name)
        if category is not None:
            return category

        category = self.db.get_category_by_name(name)
        if category is None:
            category = self.db.create_category(
                name,
                google_ime_name=DEFAULT_IME_CATEGORY,
                ms_ime_name=DEFAULT_IME_CATEGORY,
                atok_name=DEFAULT_IME_CATEGORY,
            )
            stats.categories_created += 1
            logger.debug("Created category %s during import", name)

        self._category_cache[name] = category
        return category

    # ------------------------------------------------------------------
    # Manifests
    # ------------------------------------------------------------------

    @staticmethod
    def _read_manifest(path: Path) -> list[dict[str, str]]:
        with open(path, newline="", encoding="utf-8-sig") as fh:
            reader = csv.DictReader(fh)
            if not {"id", "name"} <= set(reader.fieldnames or ()):
                raise ValueError(t("errors.csv.invalid_header", file=path.name))
            return list(reader)

    @staticmethod
    def _parse_id(row: dict[str, str]) -> int | None:
        try:
            return int((row.get("id") or "").strip())
        except ValueError:
            return None

    def _import_games_manifest(self, path: Path) -> ImportStats:
        """Insert games keeping their ids; known ids or names are left alone.

        Manifests without a ``code`` column (first release) get derived codes.
        """
        stats = ImportStats(files_processed=1)
        for row in self._read_manifest(path):
            game_id = self._parse_id(row)
            name = (row.get("name") or "").strip()
            if game_id is None or not name:
                logger.warning(t("logs.csv.manifest_row_rejected", file=path.name, row=dict(row)))
                stats.rows_rejected += 1
                continue
            if self.db.get_game(game_id) is not None or self.db.get_game_by_name(name) is not None:
                continue

            code = self._usable_code(name, (row.get("code") or "").strip())
            self.db.insert_game_with_id(
                game_id,
                name,
                code,
                created_at=(row.get("created_at") or "").strip() or None,
                updated_at=(row.get("updated_at") or "").strip() or None,
            )
            stats.games_created += 1
        return stats

    def _import_categories_manifest(self, path: Path) -> ImportStats:
        """Insert categories keeping their ids; known ids or names are left alone."""
        stats = ImportStats(files_processed=1)
        for row in self._read_manifest(path):
            category_id = self._parse_id(row)
            name = (row.get("name") or "").strip()
            if category_id is None or not name:
                logger.warning(t("logs.csv.manifest_row_rejected", file=path.name, row=dict(row)))
                stats.rows_rejected += 1
                continue
            if self.db.get_category(category_id) is not None or self.db.get_category_by_name(name) is not None:
                continue

            self.db.insert_category_with_id(
                category_id,
                name,
                google_ime_name=(row.get("google_ime_name") or "").strip() or None,
                ms_ime_name=(row.get("ms_ime_name") or "").strip() or None,
                atok_name=(row.get("atok_name") or "").strip() or None,
            )
            stats.categories_created += 1
        return stats
