"""
Unit tests for DataSyncHandler.

The prompt is replaced by a recording callable; error boxes and the
"close anyway?" question are patched out.
"""

from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from src.services.data_sync_models import ExitAction, StartupAction, SyncResult
from src.services.data_sync_service import DataSyncService
from src.ui.handlers.data_sync_handler import DataSyncHandler
from src.utils.csv_exporter import CSVExporter


class RecordingAsk:
    """Stands in for DataSyncDialog.ask and remembers the prompts."""

    def __init__(self, answer):
        self.answer = answer
        self.messages = []

    def __call__(self, message, parent):
        self.messages.append(message)
        return self.answer


def _handler(database, csv_dir: Path, answer=None) -> tuple[DataSyncHandler, RecordingAsk]:
    ask = RecordingAsk(answer)
    return DataSyncHandler(DataSyncService(database, csv_dir), ask=ask), ask


def _add_entry(database) -> None:
    game = database.get_game_by_code("dq")
    noun = database.get_category_by_name("名詞")
    database.create_entry(game.id, noun.id, "ほいみ", "ホイミ")


# ==================================================================
# Startup
# ==================================================================


class TestStartupSync:
    """Tests for run_startup_sync()."""

    def test_empty_everything_skips(self, database, csv_dir):
        """No data anywhere: nothing is asked, nothing written."""
        handler, ask = _handler(database, csv_dir)

        result = handler.run_startup_sync()

        assert result.success is True
        assert ask.messages == []
        assert not csv_dir.exists()

    def test_auto_import_without_prompt(self, populated_database, csv_dir, tmp_path):
        """A fresh database imports the CSV directory silently."""
        from src.core.db import Database

        CSVExporter(populated_database).export_directory(csv_dir)
        fresh = Database(tmp_path / "fresh.db")
        handler, ask = _handler(fresh, csv_dir)

        result = handler.run_startup_sync()

        assert result.success is True
        assert ask.messages == []
        assert fresh.get_entry_count() == 3
        # Imported rows are the new baseline
        assert handler.service.snapshot.entry_count == 3
        fresh.close()

    def test_conflict_asks_user(self, populated_database, csv_dir):
        """A missing CSV directory with data prompts with two options."""
        handler, ask = _handler(populated_database, csv_dir, StartupAction.BACKUP_AND_IMPORT)

        result = handler.run_startup_sync()

        assert result.success is True
        assert len(ask.messages) == 1
        assert len(ask.messages[0].options) == 2
        assert (csv_dir / "game-dq.csv").exists()

    def test_cancel_keeps_database(self, populated_database, csv_dir):
        """Closing the prompt is a cancellation, not an error."""
        handler, _ask = _handler(populated_database, csv_dir, None)

        with patch.object(handler, "_show_error") as show_error:
            result = handler.run_startup_sync()

        assert result.cancelled is True
        show_error.assert_not_called()
        assert populated_database.get_entry_count() == 3
        assert not csv_dir.exists()

    def test_failure_is_shown(self, populated_database, csv_dir):
        """A failed action is reported in an error box."""
        handler, _ask = _handler(populated_database, csv_dir, StartupAction.IMPORT_CSV)

        with patch.object(handler, "_show_error") as show_error:
            result = handler.run_startup_sync()

        assert result.success is False
        show_error.assert_called_once()
        assert "Directory not found" in show_error.call_args[0][0]


# ==================================================================
# Shutdown
# ==================================================================


class TestExitSync:
    """Tests for run_exit_sync()."""

    def test_nothing_to_save_closes(self, populated_database, csv_dir):
        """Unchanged and exported data closes without a prompt."""
        CSVExporter(populated_database).export_directory(csv_dir)
        handler, ask = _handler(populated_database, csv_dir)

        assert handler.run_exit_sync() is True
        assert ask.messages == []

    def test_unexported_data_is_backed_up_silently(self, populated_database, csv_dir):
        """Data that never reached the CSV directory is exported without asking."""
        handler, ask = _handler(populated_database, csv_dir)

        assert handler.run_exit_sync() is True
        assert ask.messages == []
        assert (csv_dir / "game-dq.csv").exists()

    def test_changes_export_on_request(self, populated_database, csv_dir):
        """Choosing export writes the CSV directory and closes."""
        handler, ask = _handler(populated_database, csv_dir, ExitAction.EXPORT_CSV)
        _add_entry(populated_database)

        assert handler.run_exit_sync() is True
        assert len(ask.messages) == 1
        assert "ホイミ" in (csv_dir / "game-dq.csv").read_text(encoding="utf-8")

    def test_changes_skip_export(self, populated_database, csv_dir):
        """Choosing not to save closes without writing."""
        handler, _ask = _handler(populated_database, csv_dir, ExitAction.SKIP_EXPORT)
        _add_entry(populated_database)

        assert handler.run_exit_sync() is True
        assert not csv_dir.exists()

    def test_cancel_keeps_window_open(self, populated_database, csv_dir):
        """Closing the prompt aborts the shutdown."""
        handler, _ask = _handler(populated_database, csv_dir, None)
        _add_entry(populated_database)

        assert handler.run_exit_sync() is False

    @pytest.mark.parametrize("close_anyway", [True, False])
    def test_failed_export_asks_to_close_anyway(self, populated_database, csv_dir, close_anyway):
        """After a failed export the user decides whether to close."""
        handler, _ask = _handler(populated_database, csv_dir, ExitAction.EXPORT_CSV)
        handler.service.perform_auto_export = Mock(return_value=SyncResult.failed("disk full"))
        _add_entry(populated_database)

        with (
            patch.object(handler, "_show_error") as show_error,
            patch.object(handler, "_confirm_close_anyway", return_value=close_anyway),
        ):
            assert handler.run_exit_sync() is close_anyway

        assert "disk full" in show_error.call_args[0][0]
