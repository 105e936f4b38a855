"""Record store backed by one JSON file per record."""

import asyncio
import json
import logging
import re
from pathlib import Path
from typing import Optional

from ..config.settings import settings
from ..errors import ProviderError
from .base import Record, RecordStore

logger = logging.getLogger(__name__)

_SAFE_NAME = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFileStore(RecordStore):
    """
    Stores each record at ``<root>/<collection>/<record_id>.json``.

    File IO runs in a worker thread so the event loop is never blocked.
    """

    def __init__(self, root: Optional[Path] = None):
        self.root = Path(root) if root is not None else settings.storage_dir

    def _path(self, collection: str, record_id: str) -> Path:
        for name in (collection, record_id):
            if not _SAFE_NAME.match(name) or name in (".", ".."):
                raise ValueError(f"Invalid store key: {name!r}")
        return self.root / collection / f"{record_id}.json"

    async def get(self, collection: str, record_id: str) -> Optional[Record]:
        path = self._path(collection, record_id)

        def _read() -> Optional[Record]:
            if not path.exists():
                return None
            return json.loads(path.read_text(encoding="utf-8"))

        try:
            return await asyncio.to_thread(_read)
        except (OSError, json.JSONDecodeError) as e:
            raise ProviderError("store_get", f"{path}: {e}") from e

    async def put(self, collection: str, record_id: str, record: Record) -> None:
        path = self._path(collection, record_id)

        def _write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(".json.tmp")
            tmp.write_text(json.dumps(record, indent=2, default=str, ensure_ascii=False), encoding="utf-8")
            tmp.replace(path)

        try:
            await asyncio.to_thread(_write)
        except OSError as e:
            raise ProviderError("store_put", f"{path}: {e}") from e
        logger.debug("[STORE] Wrote %s/%s", collection, record_id)

    async def delete(self, collection: str, record_id: str) -> bool:
        path = self._path(collection, record_id)

        def _delete() -> bool:
            if not path.exists():
                return False
            path.unlink()
            return True

        try:
            return await asyncio.to_thread(_delete)
        except OSError as e:
            raise ProviderError("store_delete", f"{path}: {e}") from e

    async def list(self, collection: str) -> list[Record]:
        directory = self.root / collection

        def _list() -> list[Record]:
            if not directory.is_dir():
                return []
            records = []
            for path in sorted(directory.glob("*.json")):
                try:
                    records.append(json.loads(path.read_text(encoding="utf-8")))
                except (OSError, json.JSONDecodeError) as e:
                    logger.warning("[STORE] Skipping unreadable record %s: %s", path, e)
            return records

        return await asyncio.to_thread(_list)
