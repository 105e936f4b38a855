"""Approval workflow engine.

Gates the artifacts of a pipeline run behind human review steps. Each
workflow is a small state machine:

    DRAFT -> IN_REVIEW -> COMPLETED   (every step approved, modified or skipped)
                       -> REJECTED    (any step rejected)
    DRAFT / IN_REVIEW  -> CANCELLED   (administrative)

Mutations on one workflow are serialized with a per-workflow lock and each
one publishes exactly one WorkflowEvent to every subscriber.
"""

import asyncio
import inspect
import logging
import uuid
from typing import Awaitable, Callable, Optional, Union

from pydantic import ValidationError

from ..errors import (
    InvalidConfiguration,
    InvalidFeedback,
    InvalidStepContent,
    StepAlreadyResolved,
    StepNotFound,
    WorkflowClosed,
    WorkflowNotFound,
)
from ..pipeline.models import PipelineArtifact, PipelineRequest
from ..storage.base import RecordStore
from .models import (
    CLOSED_STATUSES,
    ApprovalConfiguration,
    ApprovalStatus,
    EventType,
    Step,
    StepContent,
    StepType,
    UserFeedback,
    Workflow,
    WorkflowEvent,
    WorkflowStats,
    WorkflowStatus,
    utc_now,
)

logger = logging.getLogger(__name__)

WORKFLOWS_COLLECTION = "workflows"

Subscriber = Callable[[WorkflowEvent], Union[None, Awaitable[None]]]

# (config flag, step type, title, description) in canonical order
_STEP_DEFINITIONS = (
    (
        "enable_outline_review",
        StepType.OUTLINE,
        "Outline review",
        "Check the generated article outline and adjust it if needed",
    ),
    (
        "enable_content_review",
        StepType.CONTENT,
        "Content review",
        "Check the generated article body and adjust it if needed",
    ),
    (
        "enable_image_review",
        StepType.IMAGE,
        "Image review",
        "Check the generated header image and replace it if needed",
    ),
    (
        "enable_social_review",
        StepType.SOCIAL,
        "Social post review",
        "Check the generated social posts and adjust them if needed",
    ),
    (
        "enable_final_review",
        StepType.FINAL,
        "Final review",
        "Review the whole article and get it ready for publishing",
    ),
)


class ApprovalWorkflowEngine:
    """
    Owns every approval workflow and the only way to change one.

    Workflows live in memory and are written through to ``store`` when one
    is given; workflows missing from memory are loaded from the store.
    All returned workflows and steps are deep copies.
    """

    def __init__(self, store: Optional[RecordStore] = None, default_config: Optional[ApprovalConfiguration] = None):
        self.store = store
        self.default_config = default_config or ApprovalConfiguration()
        self._workflows: dict[str, Workflow] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._subscribers: list[Subscriber] = []

    # --- Subscriptions ---

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback for workflow events.

        The callback may be a plain function or a coroutine function.
        Returns a function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    async def _publish(self, event: WorkflowEvent) -> None:
        for callback in list(self._subscribers):
            try:
                result = callback(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.warning("[WORKFLOW] Subscriber failed on %s event: %s", event.type.value, e)

    # --- Creation ---

    async def create_workflow(
        self,
        request: PipelineRequest,
        config: Optional[Union[ApprovalConfiguration, dict]] = None,
    ) -> str:
        """
        Create a workflow with one step per enabled review.

        Args:
            request: Pipeline request the workflow reviews
            config: Full configuration, or a dict of overrides for the defaults

        Returns:
            The new workflow id

        Raises:
            InvalidConfiguration: On unknown config keys or when no step is enabled
        """
        merged = self._merge_config(config)

        steps = [
            Step(id=str(uuid.uuid4()), type=step_type, title=title, description=description)
            for flag, step_type, title, description in _STEP_DEFINITIONS
            if getattr(merged, flag)
        ]
        if not steps:
            raise InvalidConfiguration("At least one review step must be enabled")

        workflow = Workflow(id=str(uuid.uuid4()), request=request, config=merged, steps=steps)
        self._workflows[workflow.id] = workflow
        await self._persist(workflow)

        logger.info(
            "[WORKFLOW] Created %s with steps: %s",
            workflow.id,
            ", ".join(s.type.value for s in steps),
        )
        await self._publish(self._event(EventType.CREATED, workflow))
        return workflow.id

    def _merge_config(self, config: Optional[Union[ApprovalConfiguration, dict]]) -> ApprovalConfiguration:
        if config is None:
            return self.default_config.model_copy()
        if isinstance(config, ApprovalConfiguration):
            return config.model_copy()
        try:
            return ApprovalConfiguration.model_validate({**self.default_config.model_dump(), **config})
        except ValidationError as e:
            raise InvalidConfiguration(f"Invalid approval configuration: {e}") from e

    # --- Mutations ---

    async def set_step_content(self, workflow_id: str, step_type: StepType, content: StepContent) -> None:
        """
        Attach generated content to the step of ``step_type``.

        Content is set once. Setting identical content again is a no-op.

        Raises:
            InvalidStepContent: Content kind does not match the step, or different content was already set
            StepNotFound: The workflow has no step of that type
        """
        step_type = StepType(step_type)
        if content.kind != step_type.value:
            raise InvalidStepContent(f"{content.kind} content cannot be attached to a {step_type.value} step")

        async with self._lock(workflow_id):
            workflow = await self._load(workflow_id)
            step = workflow.step_of_type(step_type)
            if step is None:
                raise StepNotFound(workflow_id, step_type.value)

            if step.content is not None:
                if step.content == content:
                    return
                raise InvalidStepContent(f"Content of the {step_type.value} step is already set")

            step.content = content.model_copy(deep=True)
            workflow.updated_at = utc_now()
            await self._persist(workflow)

            actionable = step.status == ApprovalStatus.PENDING and workflow.status not in CLOSED_STATUSES
            event_type = EventType.STEP_READY if actionable else EventType.UPDATED
            event = self._event(event_type, workflow, step)

        logger.info("[WORKFLOW] %s: %s content ready", workflow_id, step_type.value)
        await self._publish(event)

    async def resolve_step(self, workflow_id: str, step_id: str, feedback: UserFeedback) -> None:
        """
        Record a reviewer decision on a step.

        Approving, modifying or skipping the current step advances the
        current step index by one. Rejecting any step rejects the workflow.

        Raises:
            WorkflowNotFound / StepNotFound: Unknown ids
            WorkflowClosed: Workflow is rejected, completed or cancelled
            StepAlreadyResolved: Step already carries a decision
            InvalidFeedback: Decision is PENDING, or a required comment is missing
        """
        async with self._lock(workflow_id):
            workflow = await self._load(workflow_id)
            if workflow.status in CLOSED_STATUSES:
                raise WorkflowClosed(workflow_id, workflow.status.value)

            step_index = workflow.find_step(step_id)
            if step_index is None:
                raise StepNotFound(workflow_id, step_id)
            step = workflow.steps[step_index]
            if step.is_resolved:
                raise StepAlreadyResolved(step_id, step.status.value)

            if feedback.decision == ApprovalStatus.PENDING:
                raise InvalidFeedback("Decision must be approved, modified, rejected or skipped")
            if workflow.config.require_comments and not (feedback.comment or "").strip():
                raise InvalidFeedback("A comment is required for every decision")

            now = utc_now()
            step.status = feedback.decision
            step.feedback = feedback.model_copy(update={"timestamp": now})
            step.resolved_at = now
            if feedback.decision == ApprovalStatus.MODIFIED:
                step.modified_content = feedback.suggestions

            if feedback.decision == ApprovalStatus.REJECTED:
                workflow.status = WorkflowStatus.REJECTED
                event_type = EventType.REJECTED
            else:
                if workflow.current_step_index == step_index:
                    workflow.current_step_index = min(step_index + 1, len(workflow.steps) - 1)
                if all(s.is_resolved for s in workflow.steps):
                    workflow.status = WorkflowStatus.COMPLETED
                    event_type = EventType.COMPLETED
                else:
                    workflow.status = WorkflowStatus.IN_REVIEW
                    event_type = EventType.STEP_RESOLVED

            workflow.updated_at = now
            await self._persist(workflow)
            event = self._event(event_type, workflow, step)

        logger.info(
            "[WORKFLOW] %s: %s step %s -> workflow %s",
            workflow_id,
            step.type.value,
            feedback.decision.value,
            event.workflow.status.value,
        )
        await self._publish(event)

    async def skip_step(self, workflow_id: str, step_id: str, reason: Optional[str] = None) -> None:
        """Resolve a step as SKIPPED with the reason as comment."""
        feedback = UserFeedback(decision=ApprovalStatus.SKIPPED, comment=reason or "Step skipped by user")
        await self.resolve_step(workflow_id, step_id, feedback)

    async def set_final_artifact(self, workflow_id: str, artifact: PipelineArtifact) -> None:
        """Attach the finished pipeline artifact. Allowed at any status."""
        async with self._lock(workflow_id):
            workflow = await self._load(workflow_id)
            workflow.final_artifact = artifact.model_copy(deep=True)
            workflow.updated_at = utc_now()
            await self._persist(workflow)
            event = self._event(EventType.UPDATED, workflow)
        await self._publish(event)

    async def cancel_workflow(self, workflow_id: str, reason: Optional[str] = None) -> None:
        """Move an open workflow to CANCELLED."""
        async with self._lock(workflow_id):
            workflow = await self._load(workflow_id)
            if workflow.status not in (WorkflowStatus.DRAFT, WorkflowStatus.IN_REVIEW):
                raise WorkflowClosed(workflow_id, workflow.status.value)
            workflow.status = WorkflowStatus.CANCELLED
            workflow.cancellation_reason = reason
            workflow.updated_at = utc_now()
            await self._persist(workflow)
            event = self._event(EventType.CANCELLED, workflow)

        logger.info("[WORKFLOW] %s cancelled: %s", workflow_id, reason or "no reason given")
        await self._publish(event)

    async def delete_workflow(self, workflow_id: str) -> bool:
        """
        Remove a workflow from the store and memory.

        Returns False if it did not exist. A store failure propagates and
        leaves the workflow in place.
        """
        async with self._lock(workflow_id):
            try:
                workflow = await self._load(workflow_id)
            except WorkflowNotFound:
                return False
            if self.store is not None:
                await self.store.delete(WORKFLOWS_COLLECTION, workflow_id)
            del self._workflows[workflow_id]
            event = self._event(EventType.DELETED, workflow)

        self._locks.pop(workflow_id, None)
        await self._publish(event)
        return True

    async def duplicate_workflow(self, workflow_id: str) -> str:
        """Create a new workflow with the same request and configuration."""
        workflow = await self.get_workflow(workflow_id)
        return await self.create_workflow(workflow.request, workflow.config)

    # --- Queries ---

    async def get_workflow(self, workflow_id: str) -> Workflow:
        workflow = await self._load(workflow_id)
        return workflow.model_copy(deep=True)

    async def get_current_step(self, workflow_id: str) -> Step:
        workflow = await self._load(workflow_id)
        return workflow.steps[workflow.current_step_index].model_copy(deep=True)

    async def get_pending_steps(self, workflow_id: str) -> list[Step]:
        workflow = await self._load(workflow_id)
        return [s.model_copy(deep=True) for s in workflow.steps if s.status == ApprovalStatus.PENDING]

    async def list_workflows(self) -> list[Workflow]:
        """All workflows, most recently updated first."""
        workflows = {}
        if self.store is not None:
            for record in await self.store.list(WORKFLOWS_COLLECTION):
                workflow = Workflow.model_validate(record)
                workflows[workflow.id] = workflow
        workflows.update(self._workflows)
        ordered = sorted(workflows.values(), key=lambda w: w.updated_at, reverse=True)
        return [w.model_copy(deep=True) for w in ordered]

    async def get_stats(self) -> WorkflowStats:
        workflows = await self.list_workflows()

        ratings = [
            s.feedback.rating
            for w in workflows
            for s in w.steps
            if s.feedback is not None and s.feedback.rating is not None
        ]
        review_minutes = []
        for w in workflows:
            if w.status not in (WorkflowStatus.COMPLETED, WorkflowStatus.REJECTED):
                continue
            resolved = [s.resolved_at for s in w.steps if s.resolved_at is not None]
            if resolved:
                review_minutes.append((max(resolved) - w.created_at).total_seconds() / 60)

        return WorkflowStats(
            total=len(workflows),
            in_progress=sum(1 for w in workflows if w.status in (WorkflowStatus.DRAFT, WorkflowStatus.IN_REVIEW)),
            completed=sum(1 for w in workflows if w.status == WorkflowStatus.COMPLETED),
            rejected=sum(1 for w in workflows if w.status == WorkflowStatus.REJECTED),
            cancelled=sum(1 for w in workflows if w.status == WorkflowStatus.CANCELLED),
            average_rating=round(sum(ratings) / len(ratings), 2) if ratings else None,
            average_review_minutes=round(sum(review_minutes) / len(review_minutes), 2) if review_minutes else None,
        )

    # --- Internals ---

    def _lock(self, workflow_id: str) -> asyncio.Lock:
        return self._locks.setdefault(workflow_id, asyncio.Lock())

    async def _load(self, workflow_id: str) -> Workflow:
        workflow = self._workflows.get(workflow_id)
        if workflow is not None:
            return workflow
        if self.store is not None:
            record = await self.store.get(WORKFLOWS_COLLECTION, workflow_id)
            if record is not None:
                workflow = Workflow.model_validate(record)
                self._workflows[workflow_id] = workflow
                return workflow
        raise WorkflowNotFound(workflow_id)

    async def _persist(self, workflow: Workflow) -> None:
        """Write-through to the store. Never raises."""
        if self.store is None:
            return
        try:
            await self.store.put(WORKFLOWS_COLLECTION, workflow.id, workflow.model_dump(mode="json"))
        except Exception as e:
            logger.warning("[STORE] Failed to persist workflow %s: %s", workflow.id, e)

    def _event(self, event_type: EventType, workflow: Workflow, step: Optional[Step] = None) -> WorkflowEvent:
        return WorkflowEvent(
            type=event_type,
            workflow=workflow.model_copy(deep=True),
            step=step.model_copy(deep=True) if step is not None else None,
        )
