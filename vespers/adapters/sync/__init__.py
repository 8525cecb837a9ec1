"""Data sync service adapters."""

from .local import DataSyncService

__all__ = ["DataSyncService"]
