"""Coordinator that generates several article variants in parallel.

1. Derive variant descriptors from the requested variation strategies
2. Run one pipeline per variant concurrently (bounded by a semaphore)
3. Record each variant's outcome independently; failures never escalate
4. Recommend the best completed variant
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Iterable, Optional

from ..config.settings import settings
from ..errors import InvalidConfiguration, NotFoundError, VariantFailure
from ..pipeline.models import PipelineRequest
from ..pipeline.orchestrator import PipelineOrchestrator
from ..storage.base import RecordStore
from .comparison import ComparisonAnalyzer
from .models import Variant, VariantSet, VariantStatus
from .strategies import derive_variants, normalize_variation_types

logger = logging.getLogger(__name__)

VARIANT_SETS_COLLECTION = "variant_sets"


class VariantGenerationCoordinator:
    """Fans one request out into a set of concurrently generated variants."""

    def __init__(
        self,
        orchestrator: PipelineOrchestrator,
        analyzer: Optional[ComparisonAnalyzer] = None,
        store: Optional[RecordStore] = None,
        max_concurrency: int = settings.max_concurrent_variants,
        variant_timeout: Optional[float] = settings.variant_timeout_seconds,
    ):
        """
        Initialize coordinator.

        Args:
            orchestrator: Pipeline used for every variant
            analyzer: Scores completed variants for the recommendation
            store: Optional store the finished variant sets are written to
            max_concurrency: Maximum number of variants generating at once
            variant_timeout: Seconds one variant may take (None = unlimited)
        """
        if max_concurrency < 1:
            raise InvalidConfiguration("max_concurrency must be at least 1")
        self.orchestrator = orchestrator
        self.analyzer = analyzer or ComparisonAnalyzer()
        self.store = store
        self.max_concurrency = max_concurrency
        self.variant_timeout = variant_timeout
        self._variant_sets: dict[str, VariantSet] = {}

    async def run_variant_set(
        self,
        base_request: PipelineRequest,
        variant_count: int,
        variation_types: Iterable,
    ) -> VariantSet:
        """
        Generate up to ``variant_count`` variants of the base request.

        Every returned variant is COMPLETED or FAILED. If the caller cancels,
        unfinished variants are marked FAILED and the cancellation propagates.

        Raises:
            InvalidConfiguration: variant_count < 1, no strategies, or unknown strategy
        """
        types = normalize_variation_types(variation_types)
        variants = derive_variants(base_request, variant_count, types)
        variant_set = VariantSet(request=base_request, variation_types=types, variants=variants)

        logger.info(
            "[VARIANTS] Set %s: generating %d variants (%s), max %d concurrent",
            variant_set.id,
            len(variants),
            ", ".join(t.value for t in types),
            self.max_concurrency,
        )

        run_start = time.time()
        semaphore = asyncio.Semaphore(self.max_concurrency)
        tasks = [self._run_variant(variant, base_request, semaphore) for variant in variants]

        try:
            await asyncio.gather(*tasks, return_exceptions=True)
        except asyncio.CancelledError:
            for variant in variants:
                if variant.status in (VariantStatus.PENDING, VariantStatus.GENERATING):
                    variant.status = VariantStatus.FAILED
                    variant.error = "Cancelled"
            logger.warning("[VARIANTS] Set %s cancelled", variant_set.id)
            raise

        variant_set.completed_at = datetime.now(timezone.utc)
        variant_set.total_generation_time = round(time.time() - run_start, 2)
        variant_set.recommended_variant_id = self.analyzer.select_recommended(variants)

        completed = len(variant_set.completed_variants)
        logger.info(
            "[VARIANTS] Set %s done in %.2fs: %d completed, %d failed, recommended=%s",
            variant_set.id,
            variant_set.total_generation_time,
            completed,
            len(variants) - completed,
            variant_set.recommended_variant_id,
        )

        await self._persist(variant_set)
        return variant_set

    async def _run_variant(self, variant: Variant, base_request: PipelineRequest, semaphore: asyncio.Semaphore) -> None:
        async with semaphore:
            variant.status = VariantStatus.GENERATING
            t0 = time.time()
            try:
                run = self.orchestrator.run(variant.to_request(base_request))
                if self.variant_timeout is None:
                    output = await run
                else:
                    output = await asyncio.wait_for(run, timeout=self.variant_timeout)
            except asyncio.CancelledError:
                variant.status = VariantStatus.FAILED
                variant.error = "Cancelled"
                raise
            except asyncio.TimeoutError as e:
                self._mark_failed(variant, t0, VariantFailure(variant.name, e), f"Timed out after {self.variant_timeout}s")
                return
            except Exception as e:
                self._mark_failed(variant, t0, VariantFailure(variant.name, e), str(e))
                return

            variant.output = output
            variant.generation_time_seconds = round(time.time() - t0, 2)
            variant.status = VariantStatus.COMPLETED
            logger.info("[VARIANTS] Variant %s completed in %.2fs", variant.name, variant.generation_time_seconds)

    def _mark_failed(self, variant: Variant, t0: float, failure: VariantFailure, message: str) -> None:
        variant.status = VariantStatus.FAILED
        variant.error = message
        variant.generation_time_seconds = round(time.time() - t0, 2)
        logger.error("[VARIANTS] %s", failure)

    async def get_variant_set(self, variant_set_id: str) -> VariantSet:
        """
        Return a finished variant set.

        Raises:
            NotFoundError: No set with that id
        """
        variant_set = self._variant_sets.get(variant_set_id)
        if variant_set is None and self.store is not None:
            record = await self.store.get(VARIANT_SETS_COLLECTION, variant_set_id)
            if record is not None:
                variant_set = VariantSet.model_validate(record)
                self._variant_sets[variant_set_id] = variant_set
        if variant_set is None:
            raise NotFoundError(f"Variant set not found: {variant_set_id}")
        return variant_set.model_copy(deep=True)

    async def _persist(self, variant_set: VariantSet) -> None:
        """Keep a copy in memory and write it to the store. Never raises."""
        self._variant_sets[variant_set.id] = variant_set.model_copy(deep=True)
        if self.store is None:
            return
        try:
            await self.store.put(VARIANT_SETS_COLLECTION, variant_set.id, variant_set.model_dump(mode="json"))
        except Exception as e:
            logger.warning("[STORE] Failed to persist variant set %s: %s", variant_set.id, e)
