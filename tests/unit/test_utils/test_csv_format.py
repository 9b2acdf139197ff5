# tests/unit/test_utils/test_csv_format.py

"""Tests for the CSV directory layout helpers."""

from __future__ import annotations

from pathlib import Path

from src.utils.csv_format import (
    code_from_file_name,
    count_csv_entries,
    count_csv_games,
    format_game_comment,
    has_csv_files,
    list_game_files,
    parse_game_comment,
)

# ---------------------------------------------------------------------------
# Comment line
# ---------------------------------------------------------------------------


class TestGameComment:
    """Tests for the per-game comment line."""

    def test_current_syntax(self) -> None:
        """Name and code are recovered from the current comment."""
        comment = parse_game_comment(format_game_comment("Dragon Quest", "dq"))
        assert comment.name == "Dragon Quest"
        assert comment.code == "dq"
        assert comment.legacy_id is None

    def test_name_with_parentheses(self) -> None:
        """Parentheses inside the name do not confuse the parser."""
        comment = parse_game_comment("# Game: Persona 5 (Royal) (Code: p5r)")
        assert comment.name == "Persona 5 (Royal)"
        assert comment.code == "p5r"

    def test_legacy_syntax(self) -> None:
        """The first-release ``(ID: n)`` comment is still understood."""
        comment = parse_game_comment("# Game: ドラゴンクエスト (ID: 7)")
        assert comment.name == "ドラゴンクエスト"
        assert comment.code is None
        assert comment.legacy_id == 7

    def test_unrelated_comment(self) -> None:
        """Other comments are not game comments."""
        assert parse_game_comment("# exported by hand") is None


# ---------------------------------------------------------------------------
# File names
# ---------------------------------------------------------------------------


class TestFileNames:
    """Tests for per-game file naming."""

    def test_code_from_file_name(self) -> None:
        """The code is the part between ``game-`` and ``.csv``."""
        assert code_from_file_name(Path("game-dq.csv")) == "dq"
        assert code_from_file_name(Path("games.csv")) is None
        assert code_from_file_name(Path("game-.csv")) is None

    def test_list_game_files_sorted(self, tmp_path: Path) -> None:
        """Only per-game files are listed, sorted by name."""
        for name in ("game-b.csv", "game-a.csv", "games.csv", "categories.csv", "notes.txt"):
            (tmp_path / name).write_text("", encoding="utf-8")

        assert [p.name for p in list_game_files(tmp_path)] == ["game-a.csv", "game-b.csv"]

    def test_missing_directory(self, tmp_path: Path) -> None:
        """A missing directory has no files and counts as empty."""
        missing = tmp_path / "missing"
        assert list_game_files(missing) == []
        assert has_csv_files(missing) is False
        assert count_csv_games(missing) == 0
        assert count_csv_entries(missing) == 0


# ---------------------------------------------------------------------------
# Counting
# ---------------------------------------------------------------------------


class TestCounting:
    """Tests for the row counters used by reconciliation."""

    def test_count_games_excludes_header_and_blank_lines(self, tmp_path: Path) -> None:
        """Manifest rows are counted without the header."""
        (tmp_path / "games.csv").write_text(
            "id,name,code,created_at,updated_at\n1,A,a,x,x\n2,B,b,x,x\n\n", encoding="utf-8"
        )
        assert count_csv_games(tmp_path) == 2

    def test_count_entries_over_all_files(self, tmp_path: Path) -> None:
        """Comment, header and blank lines are not entries."""
        (tmp_path / "game-a.csv").write_text(
            "# Game: A (Code: a)\ncategory_name,reading,word,description\n名詞,あ,亜,\n名詞,い,伊,\n",
            encoding="utf-8",
        )
        (tmp_path / "game-b.csv").write_text(
            "# Game: B (Code: b)\ncategory_name,reading,word,description\n\n名詞,う,宇,\n",
            encoding="utf-8",
        )
        assert count_csv_entries(tmp_path) == 3
        assert has_csv_files(tmp_path) is True

    def test_count_entries_by_record(self, tmp_path: Path) -> None:
        """Quoted line breaks and ``#`` categories do not change the count."""
        (tmp_path / "game-a.csv").write_text(
            "# Game: A (Code: a)\n"
            "category_name,reading,word,description\n"
            '名詞,あ,亜,"line1\n\nline3"\n'
            "#タグ,い,伊,\n",
            encoding="utf-8",
        )
        assert count_csv_entries(tmp_path) == 2
