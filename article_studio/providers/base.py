"""Provider contracts the pipeline depends on.

Every generation call the orchestrator makes is declared here up front,
including the instruction-aware outline used by structure and angle variants.
Implementations raise ProviderError when the underlying service fails.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..pipeline.models import (
    ArticleOutline,
    Audience,
    FactCheckSummary,
    SocialPostSet,
    Tone,
)


class GenerationProvider(ABC):
    """AI text and image generation used by the pipeline stages."""

    @abstractmethod
    async def analyze(self, topic: str) -> str:
        """Analyze search intent, common headings and FAQ candidates for a topic."""

    @abstractmethod
    async def create_outline(
        self,
        analysis: str,
        audience: Audience,
        tone: Tone,
        topic: str,
        instructions: Optional[str] = None,
    ) -> ArticleOutline:
        """Create an article outline, honoring optional special instructions."""

    @abstractmethod
    async def write_article(
        self,
        outline: ArticleOutline,
        target_length: int,
        tone: Tone,
        audience: Audience,
        instructions: Optional[str] = None,
    ) -> str:
        """Write the markdown article body for an outline."""

    @abstractmethod
    async def create_image_prompt(self, title: str, content: str, image_theme: str = "") -> str:
        """Write an image generation prompt for the article."""

    @abstractmethod
    async def generate_image(self, prompt: str) -> str:
        """Generate an image and return a URL or data URL reference."""

    @abstractmethod
    async def generate_social_posts(
        self,
        topic: str,
        title: str,
        summary: str,
        tone: Tone,
        target_audiences: list[str],
    ) -> SocialPostSet:
        """Write announcement posts for the article."""


class FactCheckProvider(ABC):
    """Claim extraction and verification used by the fact-check stage."""

    @abstractmethod
    async def extract_claims(self, content: str, topic: str) -> list[str]:
        """Pull verifiable claims out of the article."""

    @abstractmethod
    async def verify(self, claims: list[str], content: str, topic: str) -> FactCheckSummary:
        """Verify claims and summarize the verdicts."""
