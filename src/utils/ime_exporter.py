# src/utils/ime_exporter.py

"""Exports one game's entries in the import format of a third-party IME.

All vendor files share the same shape (``reading, word, category``) and
differ only in the category label column and the delimiter. Files carry
no header row.
"""

from __future__ import annotations

import csv
import logging
import re
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING

from src.core.db.models import IMEVendor
from src.utils.i18n import t

if TYPE_CHECKING:
    from src.core.db import Database

logger = logging.getLogger("gamedict.ime_exporter")

__all__ = ["IMEExporter"]

_SLUG_INVALID = re.compile(r"[^a-zA-Z0-9\-_]")
ALL_GAMES_SLUG = "all-games"


class IMEExporter:
    """Writes vendor dictionary files for a single game."""

    def __init__(self, database: Database) -> None:
        self.db = database

    def build_rows(self, game_id: int, vendor: IMEVendor) -> list[tuple[str, str, str]]:
        """Rows ``(reading, word, vendor label)`` ordered by reading."""
        categories = {category.id: category for category in self.db.get_all_categories()}
        rows = []
        for entry in self.db.get_entries_by_game(game_id):
            category = categories.get(entry.category_id)
            label = category.vendor_label(vendor) if category else ""
            rows.append((entry.reading, entry.word, label))
        return rows

    def export(self, game_id: int, vendor: IMEVendor, output_path: Path, delimiter: str = ",") -> int:
        """Write the vendor file for one game.

        Args:
            game_id: Game to export.
            vendor: Target IME; selects the category label column.
            output_path: File to (over)write; parent directories are created.
            delimiter: Field separator.

        Returns:
            Number of rows written.
        """
        rows = self.build_rows(game_id, vendor)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", newline="", encoding="utf-8") as fh:
            writer = csv.writer(fh, delimiter=delimiter, lineterminator="\n")
            writer.writerows(rows)

        logger.info(t("logs.ime.exported", vendor=vendor.value, count=len(rows), path=str(output_path)))
        return len(rows)

    def export_microsoft_ime(self, game_id: int, export_dir: Path) -> Path:
        """Write ``{export_dir}/{code}.txt`` for Microsoft IME (tab separated).

        Raises:
            ValueError: If the game does not exist or has no entries.
        """
        game = self.db.get_game(game_id)
        if game is None:
            raise ValueError(t("errors.ime.game_not_found", id=game_id))
        if self.db.get_entry_count(game_id) == 0:
            raise ValueError(t("errors.ime.no_entries", name=game.name))

        output_path = export_dir / f"{game.code}.txt"
        self.export(game_id, IMEVendor.MS, output_path, delimiter="\t")
        return output_path

    def get_suggested_paths(self, game_id: int | None = None, base_dir: Path | None = None) -> dict[str, Path]:
        """Default file names for the export dialogs.

        Vendor files are named ``{slug}-{vendor}-{YYYY-MM-DD}.csv``, the
        Git CSV ``{slug}-{YYYY-MM-DD}.csv``. The slug is
        the game name reduced to ``[a-zA-Z0-9-_]`` in lowercase, or
        ``all-games`` without a game.

        Returns:
            Mapping with the keys ``git_csv``, ``google_csv``, ``ms_csv``
            and ``atok_csv``.
        """
        base_dir = base_dir or Path.cwd()
        game = self.db.get_game(game_id) if game_id is not None else None
        slug = _SLUG_INVALID.sub("-", game.name).lower() if game else ALL_GAMES_SLUG
        today = date.today().isoformat()

        return {
            "git_csv": base_dir / f"{slug}-{today}.csv",
            "google_csv": base_dir / f"{slug}-{IMEVendor.GOOGLE.value}-{today}.csv",
            "ms_csv": base_dir / f"{slug}-{IMEVendor.MS.value}-{today}.csv",
            "atok_csv": base_dir / f"{slug}-{IMEVendor.ATOK.value}-{today}.csv",
        }
