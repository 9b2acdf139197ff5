"""Base dialog class for standardized dialog setup."""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QDialog, QWidget

__all__ = ["BaseDialog"]


class BaseDialog(QDialog):
    """Common base for the application's dialogs.

    Sets title, minimum width and modality. Dialogs shown before the main
    window exists (startup reconciliation) have no parent and are made
    application modal instead of window modal.
    """

    def __init__(self, parent: QWidget | None, title: str, min_width: int = 480) -> None:
        """Initialize base dialog.

        Args:
            parent: Parent widget, or None during startup.
            title: Already translated window title.
            min_width: Minimum dialog width in pixels.
        """
        super().__init__(parent)
        self.setWindowTitle(title)
        self.setMinimumWidth(min_width)
        if parent is None:
            self.setWindowModality(Qt.WindowModality.ApplicationModal)
        else:
            self.setWindowModality(Qt.WindowModality.WindowModal)
