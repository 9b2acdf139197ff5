"""
Internationalization (i18n) for UI texts, sync prompts and log messages.

Translation sources, in merge order:
1. ``resources/i18n/*.json`` - language independent files (log texts)
2. ``resources/i18n/en/*.json`` - English, always loaded as fallback
3. ``resources/i18n/{locale}/*.json`` - the requested locale
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

__all__ = ["I18n", "available_languages", "get_language", "init_i18n", "t"]

logger = logging.getLogger("gamedict.i18n")

FALLBACK_LOCALE = "en"


def _merge(base: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``update`` into a copy of ``base``."""
    result = dict(base)
    for key, value in update.items():
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = _merge(current, value)
        else:
            result[key] = value
    return result


class I18n:
    """Translation table for one locale with English fallback."""

    def __init__(self, locale: str = FALLBACK_LOCALE, root: Path | None = None) -> None:
        """Load the translation files for ``locale``.

        Args:
            locale: Locale directory name below ``resources/i18n``.
            root: Override for the i18n root directory (tests).
        """
        if root is None:
            from src.utils.paths import get_resources_dir

            root = get_resources_dir() / "i18n"

        self.locale = locale
        self.i18n_root = root
        self.translations: dict[str, Any] = self._load()

    def _load(self) -> dict[str, Any]:
        merged = _merge(self._read_directory(self.i18n_root), self._read_directory(self.i18n_root / FALLBACK_LOCALE))
        if self.locale != FALLBACK_LOCALE:
            locale_dir = self.i18n_root / self.locale
            if not locale_dir.is_dir():
                logger.warning("Unknown locale '%s', falling back to '%s'", self.locale, FALLBACK_LOCALE)
            merged = _merge(merged, self._read_directory(locale_dir))
        return merged

    @staticmethod
    def _read_directory(directory: Path) -> dict[str, Any]:
        """Merge every ``*.json`` file of a directory (alphabetical order)."""
        merged: dict[str, Any] = {}
        if not directory.is_dir():
            return merged
        for file_path in sorted(directory.glob("*.json")):
            try:
                with open(file_path, "r", encoding="utf-8") as fh:
                    merged = _merge(merged, json.load(fh))
            except (OSError, json.JSONDecodeError) as e:
                logger.error("Error loading i18n file %s: %s", file_path.name, e)
        return merged

    def t(self, key: str, **kwargs: Any) -> str:
        """Look up a dot-separated key and format it with ``kwargs``.

        Missing keys come back as ``[key]`` so gaps stay visible in the UI.
        """
        value: Any = self.translations
        for part in key.split("."):
            if not isinstance(value, dict):
                return f"[{key}]"
            value = value.get(part)

        if not isinstance(value, str):
            return f"[{key}]"

        if not kwargs:
            return value
        try:
            return value.format(**kwargs)
        except (KeyError, IndexError, ValueError):
            return value


_i18n_instance: I18n | None = None


def init_i18n(locale: str = FALLBACK_LOCALE) -> I18n:
    """(Re)initialize the global translation table."""
    global _i18n_instance
    _i18n_instance = I18n(locale)
    return _i18n_instance


def _instance() -> I18n:
    if _i18n_instance is None:
        return init_i18n()
    return _i18n_instance


def get_language() -> str:
    """Return the active locale code."""
    return _instance().locale


def available_languages() -> list[str]:
    """Return the locale directories shipped with the application."""
    root = _instance().i18n_root
    return sorted(p.name for p in root.iterdir() if p.is_dir())


def t(key: str, **kwargs: Any) -> str:
    """Translate ``key`` with the global table (initialized lazily)."""
    return _instance().t(key, **kwargs)
