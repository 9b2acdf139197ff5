"""UI action-handler package.

Handlers own a slice of the application's workflows and are created
once by the entry point or the main window.
"""

from __future__ import annotations

from src.ui.handlers.data_sync_handler import DataSyncHandler

__all__ = [
    "DataSyncHandler",
]
