"""Human approval workflows for pipeline artifacts."""

from .engine import ApprovalWorkflowEngine
from .models import (
    ApprovalConfiguration,
    ApprovalStatus,
    ContentReviewData,
    EventType,
    FinalReviewData,
    ImageReviewData,
    OutlineReviewData,
    SocialReviewData,
    Step,
    StepType,
    UserFeedback,
    Workflow,
    WorkflowEvent,
    WorkflowStats,
    WorkflowStatus,
)
from .review_runner import ReviewedPipeline

__all__ = [
    "ApprovalConfiguration",
    "ApprovalStatus",
    "ApprovalWorkflowEngine",
    "ContentReviewData",
    "EventType",
    "FinalReviewData",
    "ImageReviewData",
    "OutlineReviewData",
    "ReviewedPipeline",
    "SocialReviewData",
    "Step",
    "StepType",
    "UserFeedback",
    "Workflow",
    "WorkflowEvent",
    "WorkflowStats",
    "WorkflowStatus",
]
