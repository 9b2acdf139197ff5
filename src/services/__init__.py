from __future__ import annotations

from src.services.data_sync_service import DataSyncService, classify_data_status

__all__: list[str] = [
    "DataSyncService",
    "classify_data_status",
]
