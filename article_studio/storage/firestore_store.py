"""Record store backed by Google Cloud Firestore."""

import asyncio
import logging
import os
from typing import Optional

from google.cloud import firestore

from ..config.settings import settings
from ..errors import ProviderError
from .base import Record, RecordStore

logger = logging.getLogger(__name__)


class FirestoreStore(RecordStore):
    """
    Firestore operations for workflow, variant set and history records.

    Collections are namespaced with ``collection_prefix`` so several
    deployments can share one project. The synchronous client calls run in
    worker threads.
    """

    def __init__(self, client: Optional[firestore.Client] = None, collection_prefix: Optional[str] = None):
        if client is None:
            project = os.getenv("GOOGLE_CLOUD_PROJECT") or os.getenv("FIREBASE_PROJECT_ID")
            client = firestore.Client(project=project) if project else firestore.Client()
        self.db = client
        self.collection_prefix = (
            collection_prefix if collection_prefix is not None else settings.firestore_collection_prefix
        )

    def _collection(self, collection: str):
        return self.db.collection(f"{self.collection_prefix}{collection}")

    async def get(self, collection: str, record_id: str) -> Optional[Record]:
        def _get() -> Optional[Record]:
            doc = self._collection(collection).document(record_id).get()
            return doc.to_dict() if doc.exists else None

        try:
            return await asyncio.to_thread(_get)
        except Exception as e:
            raise ProviderError("firestore_get", str(e)) from e

    async def put(self, collection: str, record_id: str, record: Record) -> None:
        try:
            await asyncio.to_thread(self._collection(collection).document(record_id).set, record)
        except Exception as e:
            raise ProviderError("firestore_put", str(e)) from e

    async def delete(self, collection: str, record_id: str) -> bool:
        def _delete() -> bool:
            doc_ref = self._collection(collection).document(record_id)
            if not doc_ref.get().exists:
                return False
            doc_ref.delete()
            return True

        try:
            return await asyncio.to_thread(_delete)
        except Exception as e:
            raise ProviderError("firestore_delete", str(e)) from e

    async def list(self, collection: str) -> list[Record]:
        def _list() -> list[Record]:
            return [doc.to_dict() for doc in self._collection(collection).stream()]

        try:
            return await asyncio.to_thread(_list)
        except Exception as e:
            raise ProviderError("firestore_list", str(e)) from e


# Singleton
_firestore_instance: Optional[FirestoreStore] = None


def get_firestore_store() -> FirestoreStore:
    """Get or create the Firestore store singleton."""
    global _firestore_instance
    if _firestore_instance is None:
        _firestore_instance = FirestoreStore()
        logger.info("[STORE] Firestore store initialized (prefix=%s)", _firestore_instance.collection_prefix)
    return _firestore_instance
