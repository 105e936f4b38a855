"""Pydantic models for variant sets."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from ..pipeline.models import Audience, PipelineArtifact, PipelineRequest, Tone


class VariationType(str, Enum):
    TONE = "tone"
    LENGTH = "length"
    STRUCTURE = "structure"
    ANGLE = "angle"
    TARGET = "target"


class VariantStatus(str, Enum):
    PENDING = "pending"
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"


class VariantParameters(BaseModel):
    """Request fields a variant overrides."""

    tone: Tone
    audience: Audience
    target_length: int
    instructions: Optional[str] = None


class Variant(BaseModel):
    """One parameterized pipeline run inside a variant set."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    description: str = ""
    parameters: VariantParameters
    status: VariantStatus = VariantStatus.PENDING
    output: Optional[PipelineArtifact] = None
    generation_time_seconds: Optional[float] = None
    error: Optional[str] = None

    def to_request(self, base_request: PipelineRequest) -> PipelineRequest:
        """Derive the pipeline request for this variant."""
        return base_request.model_copy(update=self.parameters.model_dump(exclude_none=True))


class VariantSet(BaseModel):
    """Result of one coordinator invocation."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    request: PipelineRequest
    variation_types: list[VariationType]
    variants: list[Variant]
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: Optional[datetime] = None
    total_generation_time: Optional[float] = None
    recommended_variant_id: Optional[str] = None

    def get_variant(self, variant_id: str) -> Optional[Variant]:
        return next((v for v in self.variants if v.id == variant_id), None)

    @property
    def completed_variants(self) -> list[Variant]:
        return [v for v in self.variants if v.status == VariantStatus.COMPLETED]
