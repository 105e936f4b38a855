"""Persistence for workflows, variant sets and article history."""

from typing import Optional

from ..config.settings import settings
from ..errors import InvalidConfiguration
from .base import Record, RecordStore
from .history import ArticleHistoryRecord, ArticleHistoryService
from .json_store import JsonFileStore
from .memory_store import InMemoryStore


def create_store(backend: Optional[str] = None) -> RecordStore:
    """Build the record store named by ``backend`` (defaults to STORAGE_BACKEND)."""
    backend = (backend or settings.storage_backend).lower()
    if backend == "memory":
        return InMemoryStore()
    if backend == "json":
        return JsonFileStore(settings.storage_dir)
    if backend == "firestore":
        # Imported here so the Google client is only loaded when selected
        from .firestore_store import get_firestore_store

        return get_firestore_store()
    raise InvalidConfiguration(f"Unknown storage backend: {backend}")


__all__ = [
    "ArticleHistoryRecord",
    "ArticleHistoryService",
    "InMemoryStore",
    "JsonFileStore",
    "Record",
    "RecordStore",
    "create_store",
]
