"""Logging setup for Game Dictionary Manager.

Every module logs below the ``gamedict`` namespace
(``gamedict.database``, ``gamedict.csv_importer`` ...) so a single call to
``setup_logging`` configures the whole application.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

__all__ = ["LOG_FORMAT", "logger", "setup_logging"]

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger("gamedict")


def setup_logging(
    level: int = logging.INFO,
    log_file: Path | None = None,
) -> None:
    """Attach console (and optionally file) handlers to the app logger.

    Calling this more than once only adjusts the level; handlers are
    installed a single time.

    Args:
        level: Level for the logger and the console handler.
        log_file: Optional log file. The file handler always records
            DEBUG output so sync problems can be reconstructed later.
    """
    logger.setLevel(level)

    if logger.handlers:
        return

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%H:%M:%S")

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
