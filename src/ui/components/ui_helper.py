# src/ui/components/ui_helper.py

"""
Static helpers for message boxes with translated buttons.

Buttons are added with addButton() and t() labels because Qt6 does not
translate StandardButton texts without .qm files.
"""

from __future__ import annotations

from PyQt6.QtWidgets import QInputDialog, QMessageBox, QWidget

from src.utils.i18n import t
from src.version import __app_name__

__all__ = ["UIHelper"]


class UIHelper:
    """Message boxes and input prompts used by the main window and the sync handler."""

    @staticmethod
    def _message_box(parent: QWidget | None, icon: QMessageBox.Icon, title: str, text: str) -> QMessageBox:
        box = QMessageBox(parent)
        box.setIcon(icon)
        box.setWindowTitle(title)
        box.setText(text)
        return box

    @staticmethod
    def show_error(parent: QWidget | None, message: str, title: str | None = None) -> None:
        box = UIHelper._message_box(parent, QMessageBox.Icon.Critical, title or t("common.error"), message)
        box.addButton(t("common.ok"), QMessageBox.ButtonRole.AcceptRole)
        box.exec()

    @staticmethod
    def show_success(parent: QWidget | None, message: str, title: str | None = None) -> None:
        box = UIHelper._message_box(parent, QMessageBox.Icon.Information, title or t("common.success"), message)
        box.addButton(t("common.ok"), QMessageBox.ButtonRole.AcceptRole)
        box.exec()

    @staticmethod
    def confirm(parent: QWidget | None, question: str, title: str | None = None) -> bool:
        """Yes/No question; returns True for Yes."""
        box = UIHelper._message_box(parent, QMessageBox.Icon.Question, title or __app_name__, question)
        yes_btn = box.addButton(t("common.yes"), QMessageBox.ButtonRole.YesRole)
        box.addButton(t("common.no"), QMessageBox.ButtonRole.NoRole)
        box.setDefaultButton(yes_btn)
        box.exec()
        return box.clickedButton() == yes_btn

    @staticmethod
    def ask_text(parent: QWidget | None, title: str, label: str, current_text: str = "") -> tuple[str, bool]:
        """Single-line text input; returns ``(text, ok)``."""
        return QInputDialog.getText(parent, title, label, text=current_text)
