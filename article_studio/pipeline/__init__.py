"""Sequential article generation pipeline."""

from .models import (
    STAGE_ORDER,
    ArticleOutline,
    Audience,
    FactCheckSummary,
    PipelineArtifact,
    PipelineRequest,
    SocialPostSet,
    Tone,
)
from .orchestrator import PipelineOrchestrator, StageOutputs

__all__ = [
    "STAGE_ORDER",
    "ArticleOutline",
    "Audience",
    "FactCheckSummary",
    "PipelineArtifact",
    "PipelineOrchestrator",
    "PipelineRequest",
    "SocialPostSet",
    "StageOutputs",
    "Tone",
]
