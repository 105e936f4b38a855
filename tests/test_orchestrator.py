"""Tests for the sequential pipeline orchestrator."""

import asyncio

import pytest

from article_studio.errors import StageError
from article_studio.pipeline.models import DEFAULT_SOCIAL_AUDIENCES, STAGE_ORDER, PipelineRequest
from article_studio.pipeline.orchestrator import PipelineOrchestrator

from conftest import FakeFactChecker, FakeGenerationProvider


class TestSuccessfulRun:

    @pytest.mark.asyncio
    async def test_artifact_has_every_stage_output(self, orchestrator, base_request):
        artifact = await orchestrator.run(base_request)

        assert artifact.title == "A polite guide to Home coffee brewing"
        assert artifact.analysis.startswith("Readers searching")
        assert artifact.content.startswith("# A polite guide")
        assert artifact.meta_description == artifact.outline.meta_description
        assert artifact.fact_check.total_claims == 1
        assert artifact.image_prompt.endswith("warm kitchen morning")
        assert artifact.image_url == "https://images.example.com/header.png"
        assert len(artifact.social_posts.short_posts) == 1

    @pytest.mark.asyncio
    async def test_stages_run_in_fixed_order(self, orchestrator, provider, fact_checker, base_request):
        await orchestrator.run(base_request)

        assert provider.calls == [
            "analyze",
            "create_outline",
            "write_article",
            "create_image_prompt",
            "generate_image",
            "generate_social_posts",
        ]
        assert fact_checker.calls == ["extract_claims", "verify"]

    @pytest.mark.asyncio
    async def test_durations_recorded_per_stage(self, orchestrator, base_request):
        artifact = await orchestrator.run(base_request)

        assert list(artifact.stage_durations) == list(STAGE_ORDER)
        assert all(d >= 0 for d in artifact.stage_durations.values())
        assert artifact.total_duration_seconds >= 0

    @pytest.mark.asyncio
    async def test_instructions_reach_outline(self, orchestrator, provider, base_request):
        request = base_request.model_copy(update={"instructions": "Tell it as a story"})
        await orchestrator.run(request)
        assert provider.outline_instructions == ["Tell it as a story"]

    @pytest.mark.asyncio
    async def test_social_stage_gets_meta_description_and_audiences(self, orchestrator, provider, base_request):
        artifact = await orchestrator.run(base_request)

        call = provider.social_calls[0]
        assert call["summary"] == artifact.meta_description
        assert call["title"] == artifact.title
        assert call["target_audiences"] == DEFAULT_SOCIAL_AUDIENCES

    @pytest.mark.asyncio
    async def test_request_not_mutated(self, orchestrator, base_request):
        before = base_request.model_dump()
        await orchestrator.run(base_request)
        assert base_request.model_dump() == before


class TestStageFailures:

    @pytest.mark.asyncio
    async def test_failure_wrapped_with_stage_name(self, fact_checker, base_request):
        provider = FakeGenerationProvider(fail_on={"write_article"})
        orchestrator = PipelineOrchestrator(provider, fact_checker, stage_timeout=None)

        with pytest.raises(StageError) as exc_info:
            await orchestrator.run(base_request)

        assert exc_info.value.stage_name == "write"
        assert isinstance(exc_info.value.cause, RuntimeError)
        assert "create_image_prompt" not in provider.calls
        assert fact_checker.calls == []

    @pytest.mark.asyncio
    async def test_fact_check_failure(self, provider, base_request):
        orchestrator = PipelineOrchestrator(provider, FakeFactChecker(fail=True), stage_timeout=None)

        with pytest.raises(StageError) as exc_info:
            await orchestrator.run(base_request)
        assert exc_info.value.stage_name == "fact_check"

    @pytest.mark.asyncio
    async def test_image_generation_failure_is_image_stage(self, fact_checker, base_request):
        provider = FakeGenerationProvider(fail_on={"generate_image"})
        orchestrator = PipelineOrchestrator(provider, fact_checker, stage_timeout=None)

        with pytest.raises(StageError) as exc_info:
            await orchestrator.run(base_request)
        assert exc_info.value.stage_name == "image"

    @pytest.mark.asyncio
    async def test_stage_timeout(self, fact_checker, base_request):
        provider = FakeGenerationProvider(write_delay=1.0)
        orchestrator = PipelineOrchestrator(provider, fact_checker, stage_timeout=0.05)

        with pytest.raises(StageError) as exc_info:
            await orchestrator.run(base_request)

        assert exc_info.value.stage_name == "write"
        assert isinstance(exc_info.value.cause, asyncio.TimeoutError)

    @pytest.mark.asyncio
    async def test_cancellation_is_not_wrapped(self, fact_checker, base_request):
        provider = FakeGenerationProvider(write_delay=5.0)
        orchestrator = PipelineOrchestrator(provider, fact_checker, stage_timeout=None)

        task = asyncio.create_task(orchestrator.run(base_request))
        await asyncio.sleep(0.05)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert "create_image_prompt" not in provider.calls


class TestStageHook:

    @pytest.mark.asyncio
    async def test_hook_called_after_each_stage(self, orchestrator, base_request):
        seen = []

        async def hook(stage_name, outputs):
            seen.append(stage_name)

        await orchestrator.run(base_request, on_stage_complete=hook)
        assert seen == list(STAGE_ORDER)

    @pytest.mark.asyncio
    async def test_hook_sees_outputs_so_far(self, orchestrator, base_request):
        snapshots = {}

        async def hook(stage_name, outputs):
            snapshots[stage_name] = (outputs.outline is not None, outputs.content is not None)

        await orchestrator.run(base_request, on_stage_complete=hook)
        assert snapshots["analyze"] == (False, False)
        assert snapshots["outline"] == (True, False)
        assert snapshots["write"] == (True, True)

    @pytest.mark.asyncio
    async def test_hook_error_reported_for_its_stage(self, orchestrator, provider, base_request):
        async def hook(stage_name, outputs):
            if stage_name == "outline":
                raise ValueError("reviewer store unavailable")

        with pytest.raises(StageError) as exc_info:
            await orchestrator.run(base_request, on_stage_complete=hook)

        assert exc_info.value.stage_name == "outline"
        assert "write_article" not in provider.calls


class TestPipelineRequest:

    def test_empty_topic_rejected(self):
        with pytest.raises(ValueError):
            PipelineRequest(topic="   ")

    def test_non_positive_length_rejected(self):
        with pytest.raises(ValueError):
            PipelineRequest(topic="Coffee", target_length=0)

    def test_request_is_frozen(self, base_request):
        with pytest.raises(ValueError):
            base_request.topic = "Tea"
