"""Pydantic models for pipeline requests, stage outputs and the final artifact."""

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Tone(str, Enum):
    POLITE = "polite"
    FRIENDLY = "friendly"
    PROFESSIONAL = "professional"


class Audience(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    EXPERT = "expert"


# Stage names in execution order
STAGE_ANALYZE = "analyze"
STAGE_OUTLINE = "outline"
STAGE_WRITE = "write"
STAGE_FACT_CHECK = "fact_check"
STAGE_IMAGE = "image"
STAGE_SOCIAL_POSTS = "social_posts"

STAGE_ORDER = (
    STAGE_ANALYZE,
    STAGE_OUTLINE,
    STAGE_WRITE,
    STAGE_FACT_CHECK,
    STAGE_IMAGE,
    STAGE_SOCIAL_POSTS,
)

# Audiences the social post stage writes for
DEFAULT_SOCIAL_AUDIENCES = [
    "Beginners",
    "Intermediate learners",
    "Business professionals",
    "Parents",
    "Students",
]


class PipelineRequest(BaseModel):
    """Immutable input for one pipeline run."""

    model_config = ConfigDict(frozen=True)

    topic: str
    tone: Tone = Tone.POLITE
    audience: Audience = Audience.BEGINNER
    target_length: int = 5000
    image_theme: str = ""
    instructions: Optional[str] = None

    @field_validator("topic")
    @classmethod
    def validate_topic(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("topic must not be empty")
        return v

    @field_validator("target_length")
    @classmethod
    def validate_target_length(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("target_length must be positive")
        return v


class OutlineSection(BaseModel):
    heading: str
    content: str = ""


class FAQItem(BaseModel):
    question: str
    answer: str


class ArticleOutline(BaseModel):
    """Article structure produced by the outline stage."""

    title: str
    meta_description: str = ""
    introduction: str = ""
    sections: list[OutlineSection] = Field(default_factory=list)
    faq: list[FAQItem] = Field(default_factory=list)


Confidence = Literal["high", "medium", "low"]
Verdict = Literal["correct", "incorrect", "partially-correct", "unverified"]


class FactCheckSource(BaseModel):
    title: str
    url: str
    snippet: str = ""
    published_date: Optional[str] = None
    domain: str = ""
    relevance_score: float = 0.0


class FactCheckResult(BaseModel):
    """Verdict for a single claim."""

    claim: str
    is_verified: bool = False
    confidence: Confidence = "low"
    verdict: Verdict = "unverified"
    explanation: str = ""
    suggested_correction: Optional[str] = None
    sources: list[FactCheckSource] = Field(default_factory=list)


class FactCheckSummary(BaseModel):
    """Aggregate verdicts for all claims in an article."""

    total_claims: int = 0
    verified_claims: int = 0
    unverified_claims: int = 0
    incorrect_claims: int = 0
    overall_confidence: Confidence = "medium"
    needs_review: bool = False
    results: list[FactCheckResult] = Field(default_factory=list)

    @classmethod
    def from_results(cls, results: list[FactCheckResult]) -> "FactCheckSummary":
        """Summarize claim verdicts.

        Overall confidence is "high" or "low" when more than half of the
        claims carry that confidence, "medium" otherwise. Review is needed
        when any claim is incorrect, more than half are unverified, or the
        overall confidence is low.
        """
        total = len(results)
        verified = sum(1 for r in results if r.is_verified and r.verdict == "correct")
        unverified = sum(1 for r in results if r.verdict == "unverified")
        incorrect = sum(1 for r in results if r.verdict == "incorrect")

        high = sum(1 for r in results if r.confidence == "high")
        low = sum(1 for r in results if r.confidence == "low")
        if high > total / 2:
            overall: Confidence = "high"
        elif low > total / 2:
            overall = "low"
        else:
            overall = "medium"

        needs_review = incorrect > 0 or unverified > total / 2 or overall == "low"

        return cls(
            total_claims=total,
            verified_claims=verified,
            unverified_claims=unverified,
            incorrect_claims=incorrect,
            overall_confidence=overall,
            needs_review=needs_review,
            results=results,
        )


class SocialPost(BaseModel):
    type: Literal["short", "long"] = "short"
    target: str = ""
    text: str
    hashtags: list[str] = Field(default_factory=list)
    character_count: int = 0


class SocialThread(BaseModel):
    tweets: list[str] = Field(default_factory=list)

    @property
    def total_characters(self) -> int:
        return sum(len(t) for t in self.tweets)


class SocialPostSet(BaseModel):
    """Announcement posts produced by the social stage."""

    short_posts: list[SocialPost] = Field(default_factory=list)
    long_posts: list[SocialPost] = Field(default_factory=list)
    threads: list[SocialThread] = Field(default_factory=list)
    schedule_suggestion: Optional[str] = None


class PipelineArtifact(BaseModel):
    """Everything one successful pipeline run produced."""

    analysis: str
    outline: ArticleOutline
    content: str
    meta_description: str = ""
    fact_check: FactCheckSummary
    image_prompt: str = ""
    image_url: str = ""
    social_posts: SocialPostSet
    stage_durations: dict[str, float] = Field(default_factory=dict)
    total_duration_seconds: float = 0.0

    @property
    def title(self) -> str:
        return self.outline.title

    @property
    def content_length(self) -> int:
        return len(self.content)
