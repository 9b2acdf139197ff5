# src/utils/csv_exporter.py

"""CSV export of the whole dictionary into the Git-managed directory.

Writes ``games.csv``, ``categories.csv`` and one ``game-{code}.csv`` per
game that has entries. File names use the game code, not the numeric id,
so they stay stable when a re-import assigns new ids.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any, TYPE_CHECKING

from src.core.db.models import Category, Entry, Game
from src.utils.csv_format import (
    CATEGORIES_FILE,
    CATEGORIES_HEADER,
    ENTRIES_HEADER,
    GAMES_FILE,
    GAMES_HEADER,
    format_game_comment,
    game_file_name,
)
from src.utils.i18n import t

if TYPE_CHECKING:
    from src.core.db import Database

logger = logging.getLogger("gamedict.csv_exporter")

__all__ = ["CSVExporter"]


class CSVExporter:
    """Mirrors the database into a CSV directory.

    Every file is rewritten completely on each export; rows follow the
    database order (games by name, entries by reading).
    """

    def __init__(self, database: Database) -> None:
        self.db = database

    @staticmethod
    def _write(
        output_path: Path,
        headers: Sequence[str],
        rows: Iterable[Sequence[Any]],
        comment: str | None = None,
    ) -> Path:
        """Shared CSV writing: optional comment line, header, rows.

        Args:
            output_path: File to (over)write.
            headers: Column header names.
            rows: Row values in header order.
            comment: Raw line written before the header.

        Returns:
            ``output_path``.
        """
        with open(output_path, "w", newline="", encoding="utf-8") as fh:
            if comment is not None:
                fh.write(comment + "\n")
            writer = csv.writer(fh, lineterminator="\n")
            writer.writerow(headers)
            writer.writerows(rows)
        return output_path

    def export_directory(self, output_dir: Path) -> list[Path]:
        """Export all games, categories and entries into ``output_dir``.

        The directory is created if needed. Manifests are only written
        when there is at least one row; games without entries get no
        per-game file.

        Args:
            output_dir: Target directory.

        Returns:
            Paths of all files written.

        Raises:
            OSError: If the directory or a file cannot be written.
        """
        output_dir.mkdir(parents=True, exist_ok=True)

        games = self.db.get_all_games()
        categories = self.db.get_all_categories()
        written: list[Path] = []

        if games:
            written.append(self._export_games(games, output_dir / GAMES_FILE))
        if categories:
            written.append(self._export_categories(categories, output_dir / CATEGORIES_FILE))

        category_names = {category.id: category.name for category in categories}
        for game in games:
            entries = self.db.get_entries_by_game(game.id)
            if not entries:
                logger.debug("Skipping game %s: no entries", game.code)
                continue
            written.append(self._export_game(game, entries, category_names, output_dir))

        logger.info(t("logs.csv.exported", files=len(written), path=str(output_dir)))
        return written

    def _export_games(self, games: list[Game], output_path: Path) -> Path:
        return self._write(
            output_path,
            GAMES_HEADER,
            ([g.id, g.name, g.code, g.created_at, g.updated_at] for g in games),
        )

    def _export_categories(self, categories: list[Category], output_path: Path) -> Path:
        return self._write(
            output_path,
            CATEGORIES_HEADER,
            (
                [c.id, c.name, c.google_ime_name or "", c.ms_ime_name or "", c.atok_name or ""]
                for c in categories
            ),
        )

    def _export_game(
        self,
        game: Game,
        entries: list[Entry],
        category_names: dict[int, str],
        output_dir: Path,
    ) -> Path:
        """Write ``game-{code}.csv``; the category column holds the category name."""
        rows = (
            [category_names.get(e.category_id, ""), e.reading, e.word, e.description or ""]
            for e in entries
        )
        path = self._write(
            output_dir / game_file_name(game.code),
            ENTRIES_HEADER,
            rows,
            comment=format_game_comment(game.name, game.code),
        )
        logger.debug("Exported %d entries of %s to %s", len(entries), game.name, path.name)
        return path
