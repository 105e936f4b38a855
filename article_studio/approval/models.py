"""Pydantic models for human approval workflows."""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..pipeline.models import ArticleOutline, FactCheckSummary, PipelineArtifact, PipelineRequest, SocialPostSet


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StepType(str, Enum):
    OUTLINE = "outline"
    CONTENT = "content"
    IMAGE = "image"
    SOCIAL = "social"
    FINAL = "final"


class ApprovalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    MODIFIED = "modified"
    SKIPPED = "skipped"


class WorkflowStatus(str, Enum):
    DRAFT = "draft"
    IN_REVIEW = "in_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Statuses that accept no further decisions
CLOSED_STATUSES = (WorkflowStatus.REJECTED, WorkflowStatus.COMPLETED, WorkflowStatus.CANCELLED)


class ApprovalConfiguration(BaseModel):
    """Which review steps a workflow has, and how decisions are validated."""

    model_config = ConfigDict(extra="forbid")

    enable_outline_review: bool = True
    enable_content_review: bool = True
    enable_image_review: bool = True
    enable_social_review: bool = False
    enable_final_review: bool = True
    # Declared for compatibility with stored configurations; not acted upon
    auto_approve_on_timeout: bool = False
    timeout_minutes: int = 30
    require_comments: bool = False
    minimum_rating: Optional[int] = None


class UserFeedback(BaseModel):
    """A reviewer's decision on one step."""

    decision: ApprovalStatus
    comment: Optional[str] = None
    suggestions: Optional[str] = None
    rating: Optional[int] = None
    timestamp: Optional[datetime] = None

    @field_validator("rating")
    @classmethod
    def validate_rating(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and not 1 <= v <= 5:
            raise ValueError("rating must be between 1 and 5")
        return v


# --- Step content, one kind per step type ---


class OutlineReviewData(BaseModel):
    kind: Literal["outline"] = "outline"
    outline: ArticleOutline


class ContentReviewData(BaseModel):
    kind: Literal["content"] = "content"
    content: str
    word_count: int = 0
    readability_score: Optional[float] = None


class ImageReviewData(BaseModel):
    kind: Literal["image"] = "image"
    image_url: str
    image_prompt: str = ""


class SocialReviewData(BaseModel):
    kind: Literal["social"] = "social"
    posts: SocialPostSet


class FinalReviewData(BaseModel):
    kind: Literal["final"] = "final"
    title: str
    meta_description: str = ""
    content_length: int = 0
    image_url: str = ""
    fact_check: Optional[FactCheckSummary] = None


StepContent = Annotated[
    Union[OutlineReviewData, ContentReviewData, ImageReviewData, SocialReviewData, FinalReviewData],
    Field(discriminator="kind"),
]


class Step(BaseModel):
    """One review gate inside a workflow."""

    id: str
    type: StepType
    title: str
    description: str = ""
    content: Optional[StepContent] = None
    status: ApprovalStatus = ApprovalStatus.PENDING
    feedback: Optional[UserFeedback] = None
    modified_content: Optional[str] = None
    resolved_at: Optional[datetime] = None

    @property
    def is_resolved(self) -> bool:
        return self.status != ApprovalStatus.PENDING


class Workflow(BaseModel):
    """Review state for one pipeline run."""

    id: str
    request: PipelineRequest
    config: ApprovalConfiguration
    steps: list[Step]
    current_step_index: int = 0
    status: WorkflowStatus = WorkflowStatus.DRAFT
    final_artifact: Optional[PipelineArtifact] = None
    cancellation_reason: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def find_step(self, step_id: str) -> Optional[int]:
        for index, step in enumerate(self.steps):
            if step.id == step_id:
                return index
        return None

    def step_of_type(self, step_type: StepType) -> Optional[Step]:
        return next((s for s in self.steps if s.type == step_type), None)


class EventType(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    STEP_READY = "step_ready"
    STEP_RESOLVED = "step_resolved"
    COMPLETED = "completed"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    DELETED = "deleted"


class WorkflowEvent(BaseModel):
    """Notification sent to subscribers after every workflow mutation."""

    type: EventType
    workflow: Workflow
    step: Optional[Step] = None


class WorkflowStats(BaseModel):
    total: int = 0
    in_progress: int = 0
    completed: int = 0
    rejected: int = 0
    cancelled: int = 0
    average_rating: Optional[float] = None
    average_review_minutes: Optional[float] = None
