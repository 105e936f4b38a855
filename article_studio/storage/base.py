"""Abstract record store used by the workflow engine, variant coordinator and history."""

from abc import ABC, abstractmethod
from typing import Any, Optional

Record = dict[str, Any]


class RecordStore(ABC):
    """Async key/value store of JSON-compatible records grouped in collections."""

    @abstractmethod
    async def get(self, collection: str, record_id: str) -> Optional[Record]:
        """Return the record, or None when it does not exist."""
        pass

    @abstractmethod
    async def put(self, collection: str, record_id: str, record: Record) -> None:
        """Create or replace a record."""
        pass

    @abstractmethod
    async def delete(self, collection: str, record_id: str) -> bool:
        """Delete a record. Returns False when it did not exist."""
        pass

    @abstractmethod
    async def list(self, collection: str) -> list[Record]:
        """Return every record in a collection."""
        pass
