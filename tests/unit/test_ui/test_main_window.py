"""
Unit tests for MainWindow.

Message boxes, input prompts and file pickers are patched so nothing blocks.
"""

from unittest.mock import Mock, patch

import pytest
from PyQt6.QtGui import QCloseEvent

from src.core.db import IMEVendor
from src.services.data_sync_service import DataSyncService
from src.ui.dialogs.entry_dialog import EntryInput
from src.ui.handlers.data_sync_handler import DataSyncHandler
from src.utils.csv_exporter import CSVExporter


@pytest.fixture
def window(qtbot, populated_database, csv_dir, tmp_path):
    """MainWindow over the sample database with a silent prompt."""
    from src.ui.main_window import MainWindow

    handler = DataSyncHandler(DataSyncService(populated_database, csv_dir), ask=Mock(return_value=None))
    win = MainWindow(populated_database, handler, tmp_path / "export")
    qtbot.addWidget(win)
    return win


def _select(window, code):
    for row in range(window.game_list.count()):
        if window.game_list.item(row).text().endswith(f"({code})"):
            window.game_list.setCurrentRow(row)
            return
    raise AssertionError(f"game {code} not listed")


# ==================================================================
# Display
# ==================================================================


class TestDisplay:
    """Tests for the game list and entry table."""

    def test_games_listed_by_name(self, window):
        """Games appear in name order with their codes."""
        texts = [window.game_list.item(row).text() for row in range(window.game_list.count())]
        assert texts == ["Dragon Quest (dq)", "Empty Game (empty)"]

    def test_first_game_selected(self, window):
        """The first game is selected and its entries shown."""
        assert window.entry_table.rowCount() == 3
        assert window.entry_table.item(0, 1).text() == "あばかむ"

    def test_selection_changes_entries(self, window):
        """Selecting the empty game clears the table."""
        _select(window, "empty")
        assert window.entry_table.rowCount() == 0

    def test_sync_handler_prompts_are_parented(self, window):
        """Prompts open on top of the main window."""
        assert window.sync_handler.parent is window

    def test_status_bar_counts(self, window):
        """The status bar shows game and entry totals."""
        message = window.statusBar().currentMessage()
        assert "2" in message
        assert "3" in message


# ==================================================================
# Actions
# ==================================================================


class TestActions:
    """Tests for the toolbar actions."""

    def test_export_csv(self, window, csv_dir):
        """Export writes the CSV directory and reports success."""
        with patch("src.ui.main_window.UIHelper") as helper:
            window.action_export_csv.trigger()

        assert (csv_dir / "game-dq.csv").exists()
        helper.show_success.assert_called_once()

    def test_import_csv(self, window, populated_database, tmp_path):
        """A picked directory is imported and the list refreshed."""
        other = tmp_path / "other"
        other.mkdir()
        (other / "game-ff.csv").write_text(
            "# Game: Final Fantasy (Code: ff)\ncategory_name,reading,word,description\n名詞,ちょこぼ,チョコボ,\n",
            encoding="utf-8",
        )

        with (
            patch("src.ui.main_window.QFileDialog.getExistingDirectory", return_value=str(other)),
            patch("src.ui.main_window.UIHelper") as helper,
        ):
            window.import_csv()

        assert populated_database.get_game_by_code("ff") is not None
        assert window.game_list.count() == 3
        helper.show_success.assert_called_once()

    def test_import_cancelled_picker(self, window, populated_database):
        """Closing the directory picker does nothing."""
        with (
            patch("src.ui.main_window.QFileDialog.getExistingDirectory", return_value=""),
            patch("src.ui.main_window.UIHelper") as helper,
        ):
            window.import_csv()

        assert populated_database.get_game_count() == 2
        helper.show_success.assert_not_called()
        helper.show_error.assert_not_called()

    def test_export_ms_ime(self, window, tmp_path):
        """The selected game is written as ``{code}.txt``."""
        _select(window, "dq")
        with patch("src.ui.main_window.UIHelper") as helper:
            window.action_export_ms_ime.trigger()

        assert (tmp_path / "export" / "dq.txt").exists()
        helper.show_success.assert_called_once()

    def test_export_ms_ime_empty_game(self, window, tmp_path):
        """An empty game shows the exporter's error."""
        _select(window, "empty")
        with patch("src.ui.main_window.UIHelper") as helper:
            window.export_ms_ime()

        assert "Empty Game" in helper.show_error.call_args[0][1]
        assert not (tmp_path / "export" / "empty.txt").exists()


# ==================================================================
# Search
# ==================================================================


class TestSearch:
    """Tests for the search field above the entry table."""

    def test_search_filters_entries(self, window):
        """Only matching entries of the selected game are shown."""
        window.search_edit.setText("ロト")

        assert window.entry_table.rowCount() == 1
        assert window.entry_table.item(0, 2).text() == "ロト"

    def test_search_matches_description(self, window):
        """Descriptions are searched too."""
        window.search_edit.setText("最初")

        assert window.entry_table.rowCount() == 1
        assert window.entry_table.item(0, 2).text() == "スライム"

    def test_clearing_search_restores_entries(self, window):
        """An empty search shows every entry again."""
        window.search_edit.setText("ロト")
        window.search_edit.clear()

        assert window.entry_table.rowCount() == 3

    def test_search_is_scoped_to_selected_game(self, window):
        """Entries of other games never match."""
        _select(window, "empty")
        window.search_edit.setText("ロト")

        assert window.entry_table.rowCount() == 0


# ==================================================================
# Single-file import and vendor exports
# ==================================================================


class TestFileActions:
    """Tests for single-file import and the Google/ATOK exports."""

    def test_import_csv_file(self, window, populated_database, tmp_path):
        """A picked per-game file is imported and reported."""
        path = tmp_path / "game-ff.csv"
        path.write_text(
            "# Game: Final Fantasy (Code: ff)\ncategory_name,reading,word,description\n名詞,ちょこぼ,チョコボ,\n",
            encoding="utf-8",
        )

        with (
            patch("src.ui.main_window.QFileDialog.getOpenFileName", return_value=(str(path), "")),
            patch("src.ui.main_window.UIHelper") as helper,
        ):
            window.action_import_csv_file.trigger()

        assert populated_database.get_game_by_code("ff") is not None
        assert window.game_list.count() == 3
        helper.show_success.assert_called_once()

    def test_import_csv_file_bad_header(self, window, tmp_path):
        """A file without reading and word columns shows an error."""
        path = tmp_path / "game-bad.csv"
        path.write_text("foo,bar\n1,2\n", encoding="utf-8")

        with (
            patch("src.ui.main_window.QFileDialog.getOpenFileName", return_value=(str(path), "")),
            patch("src.ui.main_window.UIHelper") as helper,
        ):
            window.import_csv_file()

        helper.show_error.assert_called_once()
        helper.show_success.assert_not_called()

    @pytest.mark.parametrize(
        ("action_name", "vendor"),
        [("action_export_google", IMEVendor.GOOGLE), ("action_export_atok", IMEVendor.ATOK)],
    )
    def test_vendor_export_writes_chosen_file(self, window, tmp_path, action_name, vendor):
        """The save dialog defaults to the suggested name; the chosen file is written."""
        target = tmp_path / "out" / f"{vendor.value}.csv"
        _select(window, "dq")

        with (
            patch("src.ui.main_window.QFileDialog.getSaveFileName", return_value=(str(target), "")) as save,
            patch("src.ui.main_window.UIHelper") as helper,
        ):
            getattr(window, action_name).trigger()

        suggested = save.call_args[0][2]
        assert f"dragon-quest-{vendor.value}-" in suggested
        assert suggested.startswith(str(tmp_path / "export"))
        assert len(target.read_text(encoding="utf-8").splitlines()) == 3
        helper.show_success.assert_called_once()

    def test_vendor_export_cancelled(self, window, tmp_path):
        """Cancelling the save dialog writes nothing."""
        _select(window, "dq")
        with (
            patch("src.ui.main_window.QFileDialog.getSaveFileName", return_value=("", "")),
            patch("src.ui.main_window.UIHelper") as helper,
        ):
            window.export_vendor(IMEVendor.GOOGLE)

        assert not (tmp_path / "export").exists()
        helper.show_success.assert_not_called()


# ==================================================================
# Editing
# ==================================================================


class TestEditing:
    """Tests for adding and deleting games and entries."""

    def test_add_game_selects_it(self, window, populated_database):
        """A new game is created with a derived code and selected."""
        with patch("src.ui.main_window.UIHelper") as helper:
            helper.ask_text.return_value = ("Zelda", True)
            window.action_add_game.trigger()

        game = populated_database.get_game_by_name("Zelda")
        assert game is not None
        assert window.selected_game_id() == game.id
        assert window.entry_table.rowCount() == 0

    def test_add_game_cancelled(self, window, populated_database):
        """A cancelled prompt creates nothing."""
        with patch("src.ui.main_window.UIHelper") as helper:
            helper.ask_text.return_value = ("Zelda", False)
            window.add_game()

        assert populated_database.get_game_count() == 2

    def test_add_duplicate_game_shows_error(self, window, populated_database):
        """A taken name is reported instead of raised."""
        with patch("src.ui.main_window.UIHelper") as helper:
            helper.ask_text.return_value = ("Dragon Quest", True)
            window.add_game()

        helper.show_error.assert_called_once()
        assert populated_database.get_game_count() == 2

    def test_delete_game_after_confirmation(self, window, populated_database):
        """The selected game and its entries are removed."""
        _select(window, "dq")
        with patch("src.ui.main_window.UIHelper") as helper:
            helper.confirm.return_value = True
            window.action_delete_game.trigger()

        assert populated_database.get_game_by_code("dq") is None
        assert populated_database.get_entry_count() == 0
        assert window.game_list.count() == 1

    def test_delete_game_declined(self, window, populated_database):
        """Declining the confirmation keeps the game."""
        _select(window, "dq")
        with patch("src.ui.main_window.UIHelper") as helper:
            helper.confirm.return_value = False
            window.delete_game()

        assert populated_database.get_game_by_code("dq") is not None

    def test_add_entry(self, window, populated_database):
        """Values from the entry form are stored verbatim and shown."""
        _select(window, "dq")
        noun = populated_database.get_category_by_name("名詞")
        values = EntryInput(category_id=noun.id, reading="ほいみ ", word="ホイミ", description="回復")

        with (
            patch("src.ui.main_window.EntryDialog.ask", return_value=values),
            patch("src.ui.main_window.UIHelper"),
        ):
            window.action_add_entry.trigger()

        game = populated_database.get_game_by_code("dq")
        assert populated_database.find_entry(game.id, noun.id, "ほいみ ", "ホイミ") is not None
        assert window.entry_table.rowCount() == 4

    def test_add_entry_cancelled(self, window, populated_database):
        """A cancelled form adds nothing."""
        _select(window, "dq")
        with (
            patch("src.ui.main_window.EntryDialog.ask", return_value=None),
            patch("src.ui.main_window.UIHelper") as helper,
        ):
            window.add_entry()

        assert populated_database.get_entry_count() == 3
        helper.show_error.assert_not_called()

    def test_delete_entry(self, window, populated_database):
        """The current row's entry is deleted after confirmation."""
        _select(window, "dq")
        window.entry_table.setCurrentCell(0, 0)
        word = window.entry_table.item(0, 2).text()

        with patch("src.ui.main_window.UIHelper") as helper:
            helper.confirm.return_value = True
            window.action_delete_entry.trigger()

        assert populated_database.get_entry_count() == 2
        assert word in helper.confirm.call_args[0][1]
        assert window.entry_table.rowCount() == 2

    def test_delete_entry_without_selection(self, window, populated_database):
        """Nothing selected shows an error."""
        _select(window, "dq")
        window.entry_table.setCurrentCell(-1, -1)

        with patch("src.ui.main_window.UIHelper") as helper:
            window.delete_entry()

        helper.show_error.assert_called_once()
        assert populated_database.get_entry_count() == 3


# ==================================================================
# Close
# ==================================================================


class TestCloseEvent:
    """Tests for the shutdown flow on close."""

    def test_cancelled_prompt_keeps_window(self, window, populated_database):
        """Changes plus a cancelled prompt ignore the close event."""
        game = populated_database.get_game_by_code("dq")
        noun = populated_database.get_category_by_name("名詞")
        populated_database.create_entry(game.id, noun.id, "ほいみ", "ホイミ")

        event = QCloseEvent()
        window.closeEvent(event)

        assert not event.isAccepted()

    def test_nothing_to_save_closes(self, window, populated_database, csv_dir):
        """Exported, unchanged data closes immediately."""
        CSVExporter(populated_database).export_directory(csv_dir)

        event = QCloseEvent()
        window.closeEvent(event)

        assert event.isAccepted()
        window.sync_handler.ask.assert_not_called()
