"""In-process record store."""

import copy
from typing import Optional

from .base import Record, RecordStore


class InMemoryStore(RecordStore):
    """Keeps records in a dict of dicts. Records are copied in and out."""

    def __init__(self):
        self._collections: dict[str, dict[str, Record]] = {}

    async def get(self, collection: str, record_id: str) -> Optional[Record]:
        record = self._collections.get(collection, {}).get(record_id)
        return copy.deepcopy(record) if record is not None else None

    async def put(self, collection: str, record_id: str, record: Record) -> None:
        self._collections.setdefault(collection, {})[record_id] = copy.deepcopy(record)

    async def delete(self, collection: str, record_id: str) -> bool:
        return self._collections.get(collection, {}).pop(record_id, None) is not None

    async def list(self, collection: str) -> list[Record]:
        return [copy.deepcopy(r) for r in self._collections.get(collection, {}).values()]
