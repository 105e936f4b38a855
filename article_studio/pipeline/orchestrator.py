"""Orchestrator for one sequential article generation run.

Manages the full pipeline:
1. Analyze the topic
2. Create the outline
3. Write the article
4. Fact-check the article
5. Generate the header image
6. Write social announcement posts

Each stage blocks on the previous one. The first failing stage aborts the
run with a StageError and no partial artifact is returned.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from ..config.settings import settings
from ..errors import StageError
from ..pipeline.models import (
    DEFAULT_SOCIAL_AUDIENCES,
    STAGE_ANALYZE,
    STAGE_FACT_CHECK,
    STAGE_IMAGE,
    STAGE_ORDER,
    STAGE_OUTLINE,
    STAGE_SOCIAL_POSTS,
    STAGE_WRITE,
    ArticleOutline,
    FactCheckSummary,
    PipelineArtifact,
    PipelineRequest,
    SocialPostSet,
)
from ..providers.base import FactCheckProvider, GenerationProvider

logger = logging.getLogger(__name__)


@dataclass
class StageOutputs:
    """Outputs accumulated while a run progresses."""

    analysis: Optional[str] = None
    outline: Optional[ArticleOutline] = None
    content: Optional[str] = None
    fact_check: Optional[FactCheckSummary] = None
    image_prompt: Optional[str] = None
    image_url: Optional[str] = None
    social_posts: Optional[SocialPostSet] = None


StageHook = Callable[[str, StageOutputs], Awaitable[None]]


class PipelineOrchestrator:
    """
    Runs the generation stages in fixed order for one request.

    The orchestrator holds no per-run state, so one instance can serve
    many concurrent runs.
    """

    def __init__(
        self,
        provider: GenerationProvider,
        fact_checker: FactCheckProvider,
        stage_timeout: Optional[float] = settings.stage_timeout_seconds,
        social_audiences: Optional[list[str]] = None,
    ):
        """
        Initialize orchestrator.

        Args:
            provider: Text and image generation provider
            fact_checker: Claim extraction and verification provider
            stage_timeout: Seconds a single stage may take (None = unlimited)
            social_audiences: Target audiences for the social post stage
        """
        self.provider = provider
        self.fact_checker = fact_checker
        self.stage_timeout = stage_timeout
        self.social_audiences = social_audiences or list(DEFAULT_SOCIAL_AUDIENCES)

        self._stages = {
            STAGE_ANALYZE: self._analyze,
            STAGE_OUTLINE: self._outline,
            STAGE_WRITE: self._write,
            STAGE_FACT_CHECK: self._fact_check,
            STAGE_IMAGE: self._image,
            STAGE_SOCIAL_POSTS: self._social_posts,
        }

    async def run(
        self,
        request: PipelineRequest,
        on_stage_complete: Optional[StageHook] = None,
    ) -> PipelineArtifact:
        """
        Run every stage for the request.

        Args:
            request: Pipeline input
            on_stage_complete: Optional hook awaited after each successful stage

        Returns:
            PipelineArtifact with all outputs and per-stage durations

        Raises:
            StageError: On the first stage (or stage hook) that fails
        """
        run_start = time.time()
        outputs = StageOutputs()
        durations: dict[str, float] = {}

        logger.info(
            "[PIPELINE] Starting run for topic=%s, tone=%s, audience=%s, length=%d",
            request.topic[:50],
            request.tone.value,
            request.audience.value,
            request.target_length,
        )

        for index, stage_name in enumerate(STAGE_ORDER, start=1):
            t0 = time.time()
            logger.info("[STAGE %d/%d] %s...", index, len(STAGE_ORDER), stage_name)
            try:
                await self._run_stage(stage_name, request, outputs)
            except asyncio.CancelledError:
                logger.warning("[STAGE %d/%d] %s cancelled", index, len(STAGE_ORDER), stage_name)
                raise
            except Exception as e:
                logger.error("[STAGE %d/%d] %s failed: %s", index, len(STAGE_ORDER), stage_name, e)
                raise StageError(stage_name, e) from e

            durations[stage_name] = round(time.time() - t0, 2)
            logger.info(
                "[STAGE %d/%d] %s done in %.2fs", index, len(STAGE_ORDER), stage_name, durations[stage_name]
            )

            if on_stage_complete is not None:
                try:
                    await on_stage_complete(stage_name, outputs)
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    logger.error("[STAGE %d/%d] %s hook failed: %s", index, len(STAGE_ORDER), stage_name, e)
                    raise StageError(stage_name, e) from e

        total_duration = round(time.time() - run_start, 2)
        logger.info("[PIPELINE] Complete in %.2fs, title=%s", total_duration, outputs.outline.title[:50])

        return PipelineArtifact(
            analysis=outputs.analysis,
            outline=outputs.outline,
            content=outputs.content,
            meta_description=outputs.outline.meta_description,
            fact_check=outputs.fact_check,
            image_prompt=outputs.image_prompt,
            image_url=outputs.image_url,
            social_posts=outputs.social_posts,
            stage_durations=durations,
            total_duration_seconds=total_duration,
        )

    async def _run_stage(self, stage_name: str, request: PipelineRequest, outputs: StageOutputs) -> None:
        coro = self._stages[stage_name](request, outputs)
        if self.stage_timeout is None:
            await coro
        else:
            await asyncio.wait_for(coro, timeout=self.stage_timeout)

    async def _analyze(self, request: PipelineRequest, outputs: StageOutputs) -> None:
        outputs.analysis = await self.provider.analyze(request.topic)

    async def _outline(self, request: PipelineRequest, outputs: StageOutputs) -> None:
        outputs.outline = await self.provider.create_outline(
            outputs.analysis,
            request.audience,
            request.tone,
            request.topic,
            request.instructions,
        )

    async def _write(self, request: PipelineRequest, outputs: StageOutputs) -> None:
        outputs.content = await self.provider.write_article(
            outputs.outline,
            request.target_length,
            request.tone,
            request.audience,
            request.instructions,
        )

    async def _fact_check(self, request: PipelineRequest, outputs: StageOutputs) -> None:
        claims = await self.fact_checker.extract_claims(outputs.content, request.topic)
        outputs.fact_check = await self.fact_checker.verify(claims, outputs.content, request.topic)

    async def _image(self, request: PipelineRequest, outputs: StageOutputs) -> None:
        outputs.image_prompt = await self.provider.create_image_prompt(
            outputs.outline.title,
            outputs.content,
            request.image_theme,
        )
        outputs.image_url = await self.provider.generate_image(outputs.image_prompt)

    async def _social_posts(self, request: PipelineRequest, outputs: StageOutputs) -> None:
        outputs.social_posts = await self.provider.generate_social_posts(
            topic=request.topic,
            title=outputs.outline.title,
            summary=outputs.outline.meta_description,
            tone=request.tone,
            target_audiences=self.social_audiences,
        )
