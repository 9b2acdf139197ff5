"""
Form for adding a dictionary entry to the selected game.
"""

from __future__ import annotations

from dataclasses import dataclass

from PyQt6.QtWidgets import QComboBox, QDialog, QFormLayout, QHBoxLayout, QLineEdit, QPushButton, QVBoxLayout, QWidget

from src.core.db import Category
from src.ui.dialogs.base_dialog import BaseDialog
from src.utils.i18n import t

__all__ = ["EntryDialog", "EntryInput"]


@dataclass(frozen=True)
class EntryInput:
    """Values entered in the form; reading and word are never empty."""

    category_id: int
    reading: str
    word: str
    description: str | None = None


class EntryDialog(BaseDialog):
    """Category, reading, word and an optional description.

    OK stays disabled until reading and word are filled in.
    """

    def __init__(self, categories: list[Category], parent: QWidget | None = None) -> None:
        super().__init__(parent, t("ui.dialogs.entry_title"), min_width=420)
        self.categories = categories
        self._build_content(QVBoxLayout(self))

    def _build_content(self, layout: QVBoxLayout) -> None:
        form = QFormLayout()

        self.category_combo = QComboBox()
        for category in self.categories:
            self.category_combo.addItem(category.name, category.id)
        self.reading_edit = QLineEdit()
        self.word_edit = QLineEdit()
        self.description_edit = QLineEdit()

        form.addRow(t("ui.entries.category"), self.category_combo)
        form.addRow(t("ui.entries.reading"), self.reading_edit)
        form.addRow(t("ui.entries.word"), self.word_edit)
        form.addRow(t("ui.entries.description"), self.description_edit)
        layout.addLayout(form)

        btn_layout = QHBoxLayout()
        btn_layout.addStretch()

        self.btn_cancel = QPushButton(t("common.cancel"))
        self.btn_cancel.clicked.connect(self.reject)
        btn_layout.addWidget(self.btn_cancel)

        self.btn_ok = QPushButton(t("common.ok"))
        self.btn_ok.setDefault(True)
        self.btn_ok.setEnabled(False)
        self.btn_ok.clicked.connect(self.accept)
        btn_layout.addWidget(self.btn_ok)
        layout.addLayout(btn_layout)

        self.reading_edit.textChanged.connect(self._update_ok)
        self.word_edit.textChanged.connect(self._update_ok)

    def _update_ok(self) -> None:
        self.btn_ok.setEnabled(bool(self.reading_edit.text().strip() and self.word_edit.text().strip()))

    def get_entry(self) -> EntryInput | None:
        """The entered values, or None while the form is incomplete."""
        if not self.btn_ok.isEnabled() or self.category_combo.currentIndex() < 0:
            return None
        return EntryInput(
            category_id=self.category_combo.currentData(),
            reading=self.reading_edit.text(),
            word=self.word_edit.text(),
            description=self.description_edit.text() or None,
        )

    @staticmethod
    def ask(categories: list[Category], parent: QWidget | None = None) -> EntryInput | None:
        """Show the form modally; None when cancelled."""
        dialog = EntryDialog(categories, parent)
        if dialog.exec() != QDialog.DialogCode.Accepted:
            return None
        return dialog.get_entry()
