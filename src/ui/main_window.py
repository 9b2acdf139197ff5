"""
Main application window for Game Dictionary Manager.

Lists the games on the left and the selected game's entries on the
right, filtered by the search field. The toolbar offers the CSV
export/import, the vendor IME exports and adding or deleting games and
entries; closing the window runs the shutdown reconciliation.
"""

from __future__ import annotations

import csv
import logging
import sqlite3
from pathlib import Path
from typing import TYPE_CHECKING

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QCloseEvent
from PyQt6.QtWidgets import (
    QFileDialog,
    QHeaderView,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QSplitter,
    QTableWidget,
    QTableWidgetItem,
    QToolBar,
    QVBoxLayout,
    QWidget,
)

from src.core.db import IMEVendor
from src.ui.components.ui_helper import UIHelper
from src.ui.dialogs.entry_dialog import EntryDialog
from src.utils.csv_importer import CSVImporter
from src.utils.i18n import t
from src.utils.ime_exporter import IMEExporter

if TYPE_CHECKING:
    from src.core.db import Database
    from src.ui.handlers.data_sync_handler import DataSyncHandler

logger = logging.getLogger("gamedict.main_window")

__all__ = ["MainWindow"]

_ENTRY_COLUMNS = ("category", "reading", "word", "description")

_IMPORT_ERRORS = (OSError, ValueError, csv.Error, sqlite3.Error)


class MainWindow(QMainWindow):
    """Primary application window.

    Attributes:
        db: The working database.
        sync_handler: Runs the reconciliation flows; its prompts are
            parented to this window once it exists.
        export_dir: Target directory of the IME exports.
        game_list: Games ordered by name, item data holds the game id.
        search_edit: Filters the entry table of the selected game.
        entry_table: Entries of the selected game; the first column's
            item data holds the entry id.
    """

    def __init__(self, database: Database, sync_handler: DataSyncHandler, export_dir: Path) -> None:
        super().__init__()
        self.db = database
        self.sync_handler = sync_handler
        self.sync_handler.parent = self
        self.export_dir = export_dir

        self.setWindowTitle(t("ui.main_window.title"))
        self.resize(1000, 640)

        self._create_actions()
        self._create_central_widget()
        self.refresh_games()

    # ------------------------------------------------------------------
    # UI construction
    # ------------------------------------------------------------------

    def _add_action(self, toolbar: QToolBar, key: str, slot) -> QAction:
        action = QAction(t(f"ui.toolbar.{key}"), self)
        action.triggered.connect(slot)
        toolbar.addAction(action)
        return action

    def _create_actions(self) -> None:
        toolbar = QToolBar(t("ui.toolbar.title"), self)
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        self.action_export_csv = self._add_action(toolbar, "export_csv", self.export_csv)
        self.action_import_csv = self._add_action(toolbar, "import_csv", self.import_csv)
        self.action_import_csv_file = self._add_action(toolbar, "import_csv_file", self.import_csv_file)
        toolbar.addSeparator()

        self.action_export_ms_ime = self._add_action(toolbar, "export_ms_ime", self.export_ms_ime)
        self.action_export_google = self._add_action(
            toolbar, "export_google", lambda: self.export_vendor(IMEVendor.GOOGLE)
        )
        self.action_export_atok = self._add_action(toolbar, "export_atok", lambda: self.export_vendor(IMEVendor.ATOK))
        toolbar.addSeparator()

        self.action_add_game = self._add_action(toolbar, "add_game", self.add_game)
        self.action_delete_game = self._add_action(toolbar, "delete_game", self.delete_game)
        self.action_add_entry = self._add_action(toolbar, "add_entry", self.add_entry)
        self.action_delete_entry = self._add_action(toolbar, "delete_entry", self.delete_entry)

    def _create_central_widget(self) -> None:
        splitter = QSplitter(Qt.Orientation.Horizontal, self)

        self.game_list = QListWidget(splitter)
        self.game_list.currentItemChanged.connect(self._on_game_selected)

        right = QWidget(splitter)
        right_layout = QVBoxLayout(right)
        right_layout.setContentsMargins(0, 0, 0, 0)

        self.search_edit = QLineEdit()
        self.search_edit.setPlaceholderText(t("ui.search.placeholder"))
        self.search_edit.setClearButtonEnabled(True)
        self.search_edit.textChanged.connect(self.on_search)
        right_layout.addWidget(self.search_edit)

        self.entry_table = QTableWidget(0, len(_ENTRY_COLUMNS))
        self.entry_table.setHorizontalHeaderLabels([t(f"ui.entries.{column}") for column in _ENTRY_COLUMNS])
        self.entry_table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)
        self.entry_table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        self.entry_table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        self.entry_table.setSelectionMode(QTableWidget.SelectionMode.SingleSelection)
        right_layout.addWidget(self.entry_table)

        splitter.setStretchFactor(1, 3)
        self.setCentralWidget(splitter)

    # ------------------------------------------------------------------
    # Data display
    # ------------------------------------------------------------------

    def refresh_games(self, select_id: int | None = None) -> None:
        """Reload the game list, keeping (or moving to) the selection."""
        selected_id = select_id if select_id is not None else self.selected_game_id()
        self.game_list.clear()

        for game in self.db.get_all_games():
            item = QListWidgetItem(f"{game.name} ({game.code})")
            item.setData(Qt.ItemDataRole.UserRole, game.id)
            self.game_list.addItem(item)
            if game.id == selected_id:
                self.game_list.setCurrentItem(item)

        if self.game_list.currentItem() is None and self.game_list.count():
            self.game_list.setCurrentRow(0)
        self._update_status()

    def _update_status(self) -> None:
        self.statusBar().showMessage(
            t("ui.status.counts", games=self.db.get_game_count(), entries=self.db.get_entry_count())
        )

    def selected_game_id(self) -> int | None:
        item = self.game_list.currentItem()
        return item.data(Qt.ItemDataRole.UserRole) if item is not None else None

    def selected_entry_id(self) -> int | None:
        row = self.entry_table.currentRow()
        if row < 0:
            return None
        item = self.entry_table.item(row, 0)
        return item.data(Qt.ItemDataRole.UserRole) if item is not None else None

    def _on_game_selected(self, _current: QListWidgetItem | None, _previous: QListWidgetItem | None) -> None:
        self.refresh_entries()

    def on_search(self, _text: str) -> None:
        self.refresh_entries()

    def refresh_entries(self) -> None:
        """Show the selected game's entries, filtered by the search text."""
        self.entry_table.setRowCount(0)
        game_id = self.selected_game_id()
        if game_id is None:
            return

        query = self.search_edit.text().strip()
        if query:
            entries = self.db.search_entries(query, game_id)
        else:
            entries = self.db.get_entries_with_details(game_id)

        self.entry_table.setRowCount(len(entries))
        for row, entry in enumerate(entries):
            values = (entry.category_name, entry.reading, entry.word, entry.description or "")
            for column, value in enumerate(values):
                item = QTableWidgetItem(value)
                if column == 0:
                    item.setData(Qt.ItemDataRole.UserRole, entry.id)
                self.entry_table.setItem(row, column, item)

    # ------------------------------------------------------------------
    # CSV actions
    # ------------------------------------------------------------------

    def export_csv(self) -> None:
        """Write the database to the CSV directory."""
        result = self.sync_handler.service.perform_auto_export()
        if result.success:
            UIHelper.show_success(self, t("ui.messages.csv_exported", path=str(self.sync_handler.service.csv_dir)))
        else:
            UIHelper.show_error(self, t("ui.messages.csv_export_failed", error=result.error))

    def import_csv(self) -> None:
        """Import a CSV directory picked by the user."""
        start_dir = str(self.sync_handler.service.csv_dir)
        directory = QFileDialog.getExistingDirectory(self, t("ui.dialogs.choose_csv_dir"), start_dir)
        if not directory:
            return

        try:
            stats = CSVImporter(self.db).import_directory(Path(directory))
        except _IMPORT_ERRORS as e:
            logger.error(t("logs.sync.import_failed", error=str(e)))
            UIHelper.show_error(self, t("ui.messages.csv_import_failed", error=str(e)))
            return

        self.refresh_games()
        UIHelper.show_success(
            self,
            t(
                "ui.messages.csv_imported",
                games=stats.games_created,
                entries=stats.entries_created,
                skipped=stats.entries_skipped,
            ),
        )

    def import_csv_file(self) -> None:
        """Import a single per-game CSV file picked by the user."""
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            t("ui.dialogs.choose_csv_file"),
            str(self.sync_handler.service.csv_dir),
            t("ui.dialogs.csv_filter"),
        )
        if not file_path:
            return

        try:
            stats = CSVImporter(self.db).import_file(Path(file_path))
        except _IMPORT_ERRORS as e:
            logger.error(t("logs.sync.import_failed", error=str(e)))
            UIHelper.show_error(self, t("ui.messages.csv_import_failed", error=str(e)))
            return

        self.refresh_games()
        UIHelper.show_success(
            self,
            t("ui.messages.csv_file_imported", entries=stats.entries_created, skipped=stats.entries_skipped),
        )

    # ------------------------------------------------------------------
    # IME exports
    # ------------------------------------------------------------------

    def export_ms_ime(self) -> None:
        """Write the selected game as a Microsoft IME dictionary file."""
        game_id = self.selected_game_id()
        if game_id is None:
            UIHelper.show_error(self, t("ui.messages.no_game_selected"))
            return

        try:
            path = IMEExporter(self.db).export_microsoft_ime(game_id, self.export_dir)
        except (OSError, ValueError) as e:
            UIHelper.show_error(self, t("ui.messages.ime_export_failed", error=str(e)))
            return

        UIHelper.show_success(self, t("ui.messages.ime_exported", path=str(path)))

    def export_vendor(self, vendor: IMEVendor) -> None:
        """Write the selected game as a vendor CSV dictionary to a chosen file."""
        game_id = self.selected_game_id()
        if game_id is None:
            UIHelper.show_error(self, t("ui.messages.no_game_selected"))
            return

        exporter = IMEExporter(self.db)
        suggested = exporter.get_suggested_paths(game_id, self.export_dir)[f"{vendor.value}_csv"]
        file_path, _ = QFileDialog.getSaveFileName(
            self, t("ui.dialogs.save_vendor_export"), str(suggested), t("ui.dialogs.csv_filter")
        )
        if not file_path:
            return

        try:
            count = exporter.export(game_id, vendor, Path(file_path))
        except OSError as e:
            UIHelper.show_error(self, t("ui.messages.ime_export_failed", error=str(e)))
            return

        UIHelper.show_success(self, t("ui.messages.vendor_exported", count=count, path=file_path))

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def add_game(self) -> None:
        """Ask for a name and create a game with a derived code."""
        name, ok = UIHelper.ask_text(self, t("ui.dialogs.add_game_title"), t("ui.dialogs.add_game_label"))
        if not ok or not name.strip():
            return

        try:
            game = self.db.create_game(name.strip())
        except ValueError as e:
            UIHelper.show_error(self, t("ui.messages.game_add_failed", error=str(e)))
            return

        self.refresh_games(select_id=game.id)

    def delete_game(self) -> None:
        """Delete the selected game and its entries after confirmation."""
        item = self.game_list.currentItem()
        if item is None:
            UIHelper.show_error(self, t("ui.messages.no_game_selected"))
            return

        game = self.db.get_game(item.data(Qt.ItemDataRole.UserRole))
        if game is None or not UIHelper.confirm(self, t("ui.messages.confirm_delete_game", name=game.name)):
            return

        self.db.delete_game(game.id)
        self.refresh_games()

    def add_entry(self) -> None:
        """Add an entry to the selected game."""
        game_id = self.selected_game_id()
        if game_id is None:
            UIHelper.show_error(self, t("ui.messages.no_game_selected"))
            return

        values = EntryDialog.ask(self.db.get_all_categories(), self)
        if values is None:
            return

        try:
            self.db.create_entry(game_id, values.category_id, values.reading, values.word, values.description)
        except (ValueError, sqlite3.Error) as e:
            UIHelper.show_error(self, t("ui.messages.entry_add_failed", error=str(e)))
            return

        self.refresh_entries()
        self._update_status()

    def delete_entry(self) -> None:
        """Delete the selected entry after confirmation."""
        entry_id = self.selected_entry_id()
        entry = self.db.get_entry(entry_id) if entry_id is not None else None
        if entry is None:
            UIHelper.show_error(self, t("ui.messages.no_entry_selected"))
            return

        if not UIHelper.confirm(self, t("ui.messages.confirm_delete_entry", word=entry.word)):
            return

        self.db.delete_entry(entry.id)
        self.refresh_entries()
        self._update_status()

    def closeEvent(self, event: QCloseEvent) -> None:
        """Run the shutdown reconciliation; a cancelled prompt keeps the window open."""
        if self.sync_handler.run_exit_sync():
            event.accept()
        else:
            event.ignore()
