"""Locates the bundled resources directory (translations)."""

from __future__ import annotations

import sys
from pathlib import Path

__all__ = ["get_resources_dir"]

_resources_dir: Path | None = None


def get_resources_dir() -> Path:
    """Return the directory holding ``i18n/`` and other bundled data.

    Looks next to the ``src`` package first (source checkout and pip
    installs both ship ``src/resources``), then under ``sys.prefix`` for
    frozen or Flatpak-style bundles.

    Raises:
        FileNotFoundError: If neither location exists.
    """
    global _resources_dir
    if _resources_dir is not None:
        return _resources_dir

    candidates = (
        Path(__file__).resolve().parent.parent / "resources",
        Path(sys.prefix) / "resources",
    )
    for candidate in candidates:
        if candidate.is_dir():
            _resources_dir = candidate
            return _resources_dir

    searched = ", ".join(str(c) for c in candidates)
    raise FileNotFoundError(f"Could not locate resources directory. Searched: {searched}")
