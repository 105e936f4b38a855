"""Shared fixtures: fake providers, requests and stores.

No network access; every provider call is served by in-process fakes.
"""

import asyncio
from typing import Optional

import pytest

from article_studio.approval import ApprovalWorkflowEngine
from article_studio.pipeline.models import (
    ArticleOutline,
    Audience,
    FactCheckResult,
    FactCheckSummary,
    OutlineSection,
    PipelineRequest,
    SocialPost,
    SocialPostSet,
    Tone,
)
from article_studio.pipeline.orchestrator import PipelineOrchestrator
from article_studio.providers.base import FactCheckProvider, GenerationProvider
from article_studio.storage import InMemoryStore

ARTICLE_SENTENCE = "Fresh beans and a steady grind make the biggest difference in every home brew. "


def build_article(title: str, target_length: int) -> str:
    """Markdown article whose length grows with target_length."""
    body = ARTICLE_SENTENCE * max(target_length // 100, 1)
    return f"# {title}\n\n## Getting started\n\n{body}\n"


class FakeGenerationProvider(GenerationProvider):
    """
    Deterministic generation provider.

    Args:
        fail_on: Method names that raise RuntimeError
        fail_tones: Tones for which create_outline raises RuntimeError
        write_delay: Seconds write_article sleeps
        delay_tones: Per-tone sleep in write_article, overriding write_delay
    """

    def __init__(
        self,
        fail_on: Optional[set[str]] = None,
        fail_tones: Optional[set[Tone]] = None,
        write_delay: float = 0.0,
        delay_tones: Optional[dict[Tone, float]] = None,
    ):
        self.fail_on = fail_on or set()
        self.fail_tones = fail_tones or set()
        self.write_delay = write_delay
        self.delay_tones = delay_tones or {}
        self.calls: list[str] = []
        self.outline_instructions: list[Optional[str]] = []
        self.social_calls: list[dict] = []
        self.active_writes = 0
        self.max_active_writes = 0

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            raise RuntimeError(f"{name} exploded")

    async def analyze(self, topic: str) -> str:
        self._record("analyze")
        return f"Readers searching for {topic} want practical steps."

    async def create_outline(self, analysis, audience, tone, topic, instructions=None) -> ArticleOutline:
        self._record("create_outline")
        self.outline_instructions.append(instructions)
        if tone in self.fail_tones:
            raise RuntimeError(f"outline failed for {tone.value}")
        return ArticleOutline(
            title=f"A {tone.value} guide to {topic}",
            meta_description=f"Everything about {topic} for {audience.value} readers.",
            introduction="Why this matters.",
            sections=[OutlineSection(heading="Getting started", content="Basics")],
        )

    async def write_article(self, outline, target_length, tone, audience, instructions=None) -> str:
        self._record("write_article")
        self.active_writes += 1
        self.max_active_writes = max(self.max_active_writes, self.active_writes)
        try:
            delay = self.delay_tones.get(tone, self.write_delay)
            if delay:
                await asyncio.sleep(delay)
        finally:
            self.active_writes -= 1
        return build_article(outline.title, target_length)

    async def create_image_prompt(self, title, content, image_theme="") -> str:
        self._record("create_image_prompt")
        return f"Header illustration for {title} {image_theme}".strip()

    async def generate_image(self, prompt: str) -> str:
        self._record("generate_image")
        return "https://images.example.com/header.png"

    async def generate_social_posts(self, topic, title, summary, tone, target_audiences) -> SocialPostSet:
        self._record("generate_social_posts")
        self.social_calls.append(
            {"topic": topic, "title": title, "summary": summary, "tone": tone, "target_audiences": target_audiences}
        )
        text = f"New article: {title}"
        return SocialPostSet(short_posts=[SocialPost(text=text, character_count=len(text))])


class FakeFactChecker(FactCheckProvider):
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: list[str] = []

    async def extract_claims(self, content: str, topic: str) -> list[str]:
        self.calls.append("extract_claims")
        if self.fail:
            raise RuntimeError("search backend down")
        return ["Fresh beans improve flavour"]

    async def verify(self, claims: list[str], content: str, topic: str) -> FactCheckSummary:
        self.calls.append("verify")
        return FactCheckSummary.from_results(
            [FactCheckResult(claim=c, is_verified=True, confidence="high", verdict="correct") for c in claims]
        )


class FailingStore(InMemoryStore):
    """In-memory store whose writes can be made to fail."""

    def __init__(self, fail_put: bool = False, fail_delete: bool = False):
        super().__init__()
        self.fail_put = fail_put
        self.fail_delete = fail_delete

    async def put(self, collection, record_id, record):
        if self.fail_put:
            raise RuntimeError("store unavailable")
        await super().put(collection, record_id, record)

    async def delete(self, collection, record_id):
        if self.fail_delete:
            raise RuntimeError("store unavailable")
        return await super().delete(collection, record_id)


@pytest.fixture
def base_request() -> PipelineRequest:
    return PipelineRequest(
        topic="Home coffee brewing",
        tone=Tone.POLITE,
        audience=Audience.BEGINNER,
        target_length=5000,
        image_theme="warm kitchen morning",
    )


@pytest.fixture
def provider() -> FakeGenerationProvider:
    return FakeGenerationProvider()


@pytest.fixture
def fact_checker() -> FakeFactChecker:
    return FakeFactChecker()


@pytest.fixture
def orchestrator(provider, fact_checker) -> PipelineOrchestrator:
    return PipelineOrchestrator(provider, fact_checker, stage_timeout=None)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def engine() -> ApprovalWorkflowEngine:
    return ApprovalWorkflowEngine()
