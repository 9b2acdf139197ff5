"""
Unit tests for DataSyncDialog.
"""

from PyQt6.QtCore import Qt

from src.services.data_sync_models import StartupAction, SyncMessage, SyncOption


def _message(with_options: bool = True) -> SyncMessage:
    options = (
        [
            SyncOption("Import", StartupAction.IMPORT_CSV, "Load the CSV files"),
            SyncOption("Keep", StartupAction.KEEP_DB, "Use the database"),
        ]
        if with_options
        else []
    )
    return SyncMessage(title="Conflict", message="Both sides hold data.", options=options)


class TestDataSyncDialog:
    """Tests for the reconciliation prompt."""

    def test_one_button_per_option(self, qtbot):
        """Option buttons follow message order with descriptions as tooltips."""
        from src.ui.dialogs.data_sync_dialog import DataSyncDialog

        dialog = DataSyncDialog(_message())
        qtbot.addWidget(dialog)

        assert dialog.windowTitle() == "Conflict"
        assert [b.text() for b in dialog.option_buttons] == ["Import", "Keep"]
        assert dialog.option_buttons[0].toolTip() == "Load the CSV files"
        assert dialog.btn_cancel.text() == "Cancel"

    def test_click_selects_action(self, qtbot):
        """Clicking an option accepts the dialog with that action."""
        from src.ui.dialogs.data_sync_dialog import DataSyncDialog

        dialog = DataSyncDialog(_message())
        qtbot.addWidget(dialog)

        qtbot.mouseClick(dialog.option_buttons[1], Qt.MouseButton.LeftButton)

        assert dialog.selected_action is StartupAction.KEEP_DB
        assert dialog.result() == dialog.DialogCode.Accepted

    def test_cancel_leaves_no_action(self, qtbot):
        """Cancel rejects without an action."""
        from src.ui.dialogs.data_sync_dialog import DataSyncDialog

        dialog = DataSyncDialog(_message())
        qtbot.addWidget(dialog)

        qtbot.mouseClick(dialog.btn_cancel, Qt.MouseButton.LeftButton)

        assert dialog.selected_action is None
        assert dialog.result() == dialog.DialogCode.Rejected

    def test_message_without_options_has_ok(self, qtbot):
        """Informational prompts only show OK."""
        from src.ui.dialogs.data_sync_dialog import DataSyncDialog

        dialog = DataSyncDialog(_message(with_options=False))
        qtbot.addWidget(dialog)

        assert dialog.option_buttons == []
        assert dialog.btn_ok.text() == "OK"
        assert not hasattr(dialog, "btn_cancel")
