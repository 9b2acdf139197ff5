"""
Configuration - data locations, UI language and run mode.

The CSV mirror location depends on an explicit run mode (production or
test) instead of being guessed from paths. Values come from, in order:
defaults, ``.env`` / environment (``GAMEDICT_MODE``, ``GAMEDICT_DATA_DIR``),
then ``settings.json`` inside the data directory.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger("gamedict.config")


__all__ = ["AppMode", "Config", "config"]


class AppMode(Enum):
    """Selects which data set the application works on."""

    PRODUCTION = "production"
    TEST = "test"


@dataclass
class Config:
    """
    Central configuration for the application.
    Manages the database/CSV/export locations and UI preferences.
    """

    APP_DIR: Path = Path(__file__).parent.parent
    DATA_DIR: Path = APP_DIR / "data"
    SETTINGS_FILE: Path | None = None

    DB_FILENAME: str = "game-dict.db"
    LOG_FILENAME: str = "game-dict.log"

    UI_LANGUAGE: str = "ja"
    MODE: AppMode = AppMode.PRODUCTION

    # Optional overrides, resolved relative to DATA_DIR when unset
    CSV_DIR: Path | None = None
    EXPORT_DIR: Path | None = None

    def __post_init__(self):
        """Apply environment overrides and load persisted settings."""
        load_dotenv()

        env_dir = os.getenv("GAMEDICT_DATA_DIR")
        if env_dir:
            self.DATA_DIR = Path(env_dir)

        env_mode = os.getenv("GAMEDICT_MODE")
        if env_mode:
            try:
                self.MODE = AppMode(env_mode.lower())
            except ValueError:
                logger.warning("Unknown GAMEDICT_MODE '%s', using %s", env_mode, self.MODE.value)

        if self.SETTINGS_FILE is None:
            self.SETTINGS_FILE = self.DATA_DIR / "settings.json"

        self._load_settings()

    def _load_settings(self) -> None:
        """Load settings from JSON file."""
        # Local import to avoid circular dependency
        from src.utils.i18n import t

        if not self.SETTINGS_FILE.exists():
            return

        try:
            with open(self.SETTINGS_FILE, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(t("logs.config.load_error", error=e))
            return

        self.UI_LANGUAGE = data.get("ui_language", self.UI_LANGUAGE)

        csv_dir = data.get("csv_dir")
        if csv_dir:
            self.CSV_DIR = Path(csv_dir)

        export_dir = data.get("export_dir")
        if export_dir:
            self.EXPORT_DIR = Path(export_dir)

    def save(self) -> None:
        """Save current configuration to JSON file."""
        from src.utils.i18n import t

        data = {
            "ui_language": self.UI_LANGUAGE,
            "csv_dir": str(self.CSV_DIR) if self.CSV_DIR else "",
            "export_dir": str(self.EXPORT_DIR) if self.EXPORT_DIR else "",
        }

        try:
            self.SETTINGS_FILE.parent.mkdir(parents=True, exist_ok=True)
            with open(self.SETTINGS_FILE, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.error(t("logs.config.save_error", error=e))

    def _mode_root(self) -> Path:
        """Base directory for mode-dependent data (``test-data`` in test mode)."""
        if self.MODE is AppMode.TEST:
            return self.DATA_DIR / "test-data"
        return self.DATA_DIR

    def get_db_path(self) -> Path:
        """Path of the SQLite database for the current mode."""
        return self._mode_root() / self.DB_FILENAME

    def get_csv_dir(self) -> Path:
        """Directory of the Git-managed CSV mirror."""
        if self.CSV_DIR:
            return self.CSV_DIR
        return self._mode_root() / "csv"

    def get_export_dir(self) -> Path:
        """Default output directory for IME dictionary exports."""
        if self.EXPORT_DIR:
            return self.EXPORT_DIR
        return self._mode_root() / "export"

    def get_log_path(self) -> Path:
        return self.DATA_DIR / "logs" / self.LOG_FILENAME


# Global instance
config = Config()
