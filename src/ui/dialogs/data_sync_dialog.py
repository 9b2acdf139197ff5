"""
Reconciliation prompt.

Renders a SyncMessage: the message text, one button per offered action
(its description as tooltip) and a cancel button. Prompts without
options only show an OK button.
"""

from __future__ import annotations

from PyQt6.QtWidgets import QDialog, QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from src.services.data_sync_models import ExitAction, StartupAction, SyncMessage
from src.ui.dialogs.base_dialog import BaseDialog
from src.utils.i18n import t

__all__ = ["DataSyncDialog"]


class DataSyncDialog(BaseDialog):
    """Lets the user pick one of the actions of a SyncMessage.

    Attributes:
        selected_action: The chosen action, None if cancelled or if the
            prompt had no options.
        option_buttons: One button per option, in message order.
    """

    def __init__(self, message: SyncMessage, parent: QWidget | None = None) -> None:
        super().__init__(parent, message.title)
        self.message = message
        self.selected_action: StartupAction | ExitAction | None = None
        self.option_buttons: list[QPushButton] = []
        self._setup_ui()

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setSpacing(16)

        text = QLabel(self.message.message)
        text.setWordWrap(True)
        layout.addWidget(text)

        buttons = QVBoxLayout()
        for option in self.message.options:
            button = QPushButton(option.label)
            button.setToolTip(option.description)
            button.clicked.connect(lambda _checked=False, action=option.action: self._choose(action))
            buttons.addWidget(button)
            self.option_buttons.append(button)
        layout.addLayout(buttons)

        footer = QHBoxLayout()
        footer.addStretch()
        if self.message.options:
            self.btn_cancel = QPushButton(t("common.cancel"))
            self.btn_cancel.clicked.connect(self.reject)
            footer.addWidget(self.btn_cancel)
        else:
            self.btn_ok = QPushButton(t("common.ok"))
            self.btn_ok.setDefault(True)
            self.btn_ok.clicked.connect(self.accept)
            footer.addWidget(self.btn_ok)
        layout.addLayout(footer)

    def _choose(self, action: StartupAction | ExitAction) -> None:
        self.selected_action = action
        self.accept()

    @staticmethod
    def ask(message: SyncMessage, parent: QWidget | None = None) -> StartupAction | ExitAction | None:
        """Show the prompt modally.

        Returns:
            The chosen action, or None when the user cancelled.
        """
        dialog = DataSyncDialog(message, parent)
        if dialog.exec() != QDialog.DialogCode.Accepted:
            return None
        return dialog.selected_action
