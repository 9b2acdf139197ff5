# tests/conftest.py
import os
from pathlib import Path
from typing import Generator

# Ensure Qt can run headless (CI runners have no display server)
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtWidgets import QApplication
from pytestqt.qtbot import QtBot

from src.utils.i18n import init_i18n


@pytest.fixture(autouse=True, scope="session")
def english_texts():
    """All assertions on messages use the English texts."""
    init_i18n("en")


@pytest.fixture(scope="session")
def qapp():
    """QApplication instance for all Qt tests."""
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture
def qtbot(qapp, request):
    """Provide qtbot fixture with automatic cleanup."""
    bot = QtBot(request)
    yield bot
    if hasattr(bot, "cleanup"):
        bot.cleanup()


@pytest.fixture
def database(tmp_path):
    """Fresh Database on a temp file (schema loaded from SQL, categories seeded)."""
    from src.core.db import Database

    db = Database(tmp_path / "test-dict.db")
    yield db
    db.close()


@pytest.fixture
def csv_dir(tmp_path) -> Path:
    """Path of a CSV directory that does not exist yet."""
    return tmp_path / "csv"


@pytest.fixture
def populated_database(database) -> Generator:
    """Database with two games; the second has no entries.

    Game "Dragon Quest" (code ``dq``) holds three entries in two categories.
    """
    game = database.create_game("Dragon Quest", "dq")
    database.create_game("Empty Game", "empty")
    noun = database.get_category_by_name("名詞")
    person = database.get_category_by_name("人名")
    database.create_entry(game.id, noun.id, "すらいむ", "スライム", "最初の敵")
    database.create_entry(game.id, noun.id, "あばかむ", "アバカム")
    database.create_entry(game.id, person.id, "ろと", "ロト", "勇者の血筋")
    yield database
