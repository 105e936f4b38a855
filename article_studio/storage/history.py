"""Article history: a searchable record of every finished article."""

import logging
import re
import uuid
from collections import Counter
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from ..pipeline.models import Audience, PipelineArtifact, PipelineRequest, Tone
from .base import RecordStore

logger = logging.getLogger(__name__)

HISTORY_COLLECTION = "article_history"
MAX_TAGS = 10

_WORD_PATTERN = re.compile(r"[ぁ-んァ-ン一-龯A-Za-z]{2,}")


class ArticleHistoryRecord(BaseModel):
    id: str
    topic: str
    tone: Tone
    audience: Audience
    target_length: int
    title: str
    meta_description: str = ""
    content: str
    image_url: str = ""
    word_count: int = 0
    generation_time_seconds: Optional[float] = None
    tags: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def extract_tags(topic: str, content: str) -> list[str]:
    """Topic words plus the five most frequent words in the content."""
    tags: dict[str, None] = {}
    for word in topic.split():
        if len(word) > 1:
            tags[word] = None
    for word, _ in Counter(_WORD_PATTERN.findall(content)).most_common(5):
        tags[word] = None
    return list(tags)[:MAX_TAGS]


class ArticleHistoryService:
    """Saves finished articles to a RecordStore and reads them back."""

    def __init__(self, store: RecordStore):
        self.store = store

    async def save_article(self, request: PipelineRequest, artifact: PipelineArtifact) -> str:
        record = ArticleHistoryRecord(
            id=str(uuid.uuid4()),
            topic=request.topic,
            tone=request.tone,
            audience=request.audience,
            target_length=request.target_length,
            title=artifact.title,
            meta_description=artifact.meta_description,
            content=artifact.content,
            image_url=artifact.image_url,
            word_count=artifact.content_length,
            generation_time_seconds=artifact.total_duration_seconds,
            tags=extract_tags(request.topic, artifact.content),
        )
        await self.store.put(HISTORY_COLLECTION, record.id, record.model_dump(mode="json"))
        logger.info("[HISTORY] Saved article %s: %s", record.id, record.title[:50])
        return record.id

    async def get_article(self, article_id: str) -> Optional[ArticleHistoryRecord]:
        data = await self.store.get(HISTORY_COLLECTION, article_id)
        return ArticleHistoryRecord.model_validate(data) if data is not None else None

    async def list_articles(self, limit: int = 20, offset: int = 0) -> list[ArticleHistoryRecord]:
        """Newest first."""
        records = await self._all_newest_first()
        return records[offset:offset + limit]

    async def _all_newest_first(self) -> list[ArticleHistoryRecord]:
        records = [ArticleHistoryRecord.model_validate(r) for r in await self.store.list(HISTORY_COLLECTION)]
        records.sort(key=lambda r: r.created_at, reverse=True)
        return records

    async def delete_article(self, article_id: str) -> bool:
        return await self.store.delete(HISTORY_COLLECTION, article_id)

    async def search_articles(self, query: str, limit: int = 20) -> list[ArticleHistoryRecord]:
        """Case-insensitive match against topic, title, content and tags."""
        needle = query.strip().lower()
        if not needle:
            return []
        matches = []
        for record in await self._all_newest_first():
            haystack = " ".join([record.topic, record.title, record.content, *record.tags]).lower()
            if needle in haystack:
                matches.append(record)
                if len(matches) >= limit:
                    break
        return matches
