"""Pipeline run placed under human review.

Creates a workflow, runs the orchestrator and fills each review step as
soon as the stage it reviews has finished, so reviewers can start on the
outline while the article is still being written.
"""

import logging
from typing import Optional, Union

from ..errors import NotFoundError, StageError, WorkflowClosed
from ..pipeline.models import (
    STAGE_IMAGE,
    STAGE_OUTLINE,
    STAGE_SOCIAL_POSTS,
    STAGE_WRITE,
    PipelineArtifact,
    PipelineRequest,
)
from ..pipeline.orchestrator import PipelineOrchestrator, StageOutputs
from ..storage.history import ArticleHistoryService
from .engine import ApprovalWorkflowEngine
from .models import (
    ApprovalConfiguration,
    ContentReviewData,
    FinalReviewData,
    ImageReviewData,
    OutlineReviewData,
    SocialReviewData,
    StepContent,
    StepType,
)

logger = logging.getLogger(__name__)


def _outline_content(outputs: StageOutputs) -> StepContent:
    return OutlineReviewData(outline=outputs.outline)


def _article_content(outputs: StageOutputs) -> StepContent:
    return ContentReviewData(content=outputs.content, word_count=len(outputs.content))


def _image_content(outputs: StageOutputs) -> StepContent:
    return ImageReviewData(image_url=outputs.image_url, image_prompt=outputs.image_prompt or "")


def _social_content(outputs: StageOutputs) -> StepContent:
    return SocialReviewData(posts=outputs.social_posts)


# stage name -> (reviewed step type, content builder)
STAGE_STEPS = {
    STAGE_OUTLINE: (StepType.OUTLINE, _outline_content),
    STAGE_WRITE: (StepType.CONTENT, _article_content),
    STAGE_IMAGE: (StepType.IMAGE, _image_content),
    STAGE_SOCIAL_POSTS: (StepType.SOCIAL, _social_content),
}


class ReviewedPipeline:
    """Runs the pipeline with its artifacts routed into an approval workflow."""

    def __init__(
        self,
        orchestrator: PipelineOrchestrator,
        engine: ApprovalWorkflowEngine,
        history: Optional[ArticleHistoryService] = None,
    ):
        self.orchestrator = orchestrator
        self.engine = engine
        self.history = history

    async def run(
        self,
        request: PipelineRequest,
        config: Optional[Union[ApprovalConfiguration, dict]] = None,
    ) -> tuple[str, PipelineArtifact]:
        """
        Run the pipeline under review.

        Returns:
            (workflow_id, artifact)

        Raises:
            StageError: When a stage fails; the workflow is cancelled first
        """
        workflow_id = await self.engine.create_workflow(request, config)
        workflow = await self.engine.get_workflow(workflow_id)
        reviewed_types = {step.type for step in workflow.steps}

        async def fill_step(stage_name: str, outputs: StageOutputs) -> None:
            if stage_name not in STAGE_STEPS:
                return
            step_type, build = STAGE_STEPS[stage_name]
            if step_type in reviewed_types:
                await self.engine.set_step_content(workflow_id, step_type, build(outputs))

        try:
            artifact = await self.orchestrator.run(request, on_stage_complete=fill_step)
        except StageError as e:
            logger.error("[WORKFLOW] %s: pipeline failed at %s", workflow_id, e.stage_name)
            try:
                await self.engine.cancel_workflow(workflow_id, reason=f"Stage '{e.stage_name}' failed: {e.cause}")
            except (WorkflowClosed, NotFoundError):
                # Reviewers closed or deleted it while the run was in progress
                logger.info("[WORKFLOW] %s already closed or deleted, not cancelling", workflow_id)
            raise

        await self.engine.set_final_artifact(workflow_id, artifact)
        if StepType.FINAL in reviewed_types:
            await self.engine.set_step_content(
                workflow_id,
                StepType.FINAL,
                FinalReviewData(
                    title=artifact.title,
                    meta_description=artifact.meta_description,
                    content_length=artifact.content_length,
                    image_url=artifact.image_url,
                    fact_check=artifact.fact_check,
                ),
            )

        if self.history is not None:
            try:
                await self.history.save_article(request, artifact)
            except Exception as e:
                logger.warning("[HISTORY] Failed to record article for workflow %s: %s", workflow_id, e)

        return workflow_id, artifact
