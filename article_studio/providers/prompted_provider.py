"""Base generation provider that drives every stage through text prompts.

Subclasses supply a single text completion call; prompt construction,
response parsing and error wrapping live here.
"""

import logging
from abc import abstractmethod
from typing import Optional

from ..errors import ProviderError
from ..pipeline.models import ArticleOutline, Audience, SocialPostSet, Tone
from ..utils.llm_client import generate_image_async
from ._parsing import strip_code_fence
from ._prompt_helpers import (
    build_analysis_prompt,
    build_article_prompt,
    build_image_prompt_prompt,
    build_outline_prompt,
    build_social_prompt,
    parse_outline,
    parse_social_posts,
)
from .base import GenerationProvider

logger = logging.getLogger(__name__)


class PromptedGenerationProvider(GenerationProvider):
    """
    Generation provider backed by a text model plus a LiteLLM image model.

    Any exception from the model call or from parsing its output is
    re-raised as ProviderError naming the operation.
    """

    def __init__(self, model_id: str, image_model: str, max_tokens: int = 8192):
        self.model_id = model_id
        self.image_model = image_model
        self.max_tokens = max_tokens

    @abstractmethod
    async def _complete(self, prompt: str, temperature: float, max_tokens: int) -> str:
        """Send a single user prompt and return the response text."""

    async def _call(
        self,
        operation: str,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
    ) -> str:
        logger.info("[PROVIDER] %s via %s (%d prompt chars)", operation, self.model_id, len(prompt))
        try:
            text = await self._complete(prompt, temperature, max_tokens or self.max_tokens)
        except ProviderError:
            raise
        except Exception as e:
            logger.error("[PROVIDER] %s failed: %s", operation, e)
            raise ProviderError(operation, str(e)) from e
        if not text or not text.strip():
            raise ProviderError(operation, "empty response")
        return text

    async def analyze(self, topic: str) -> str:
        return (await self._call("analyze", build_analysis_prompt(topic), temperature=0.3)).strip()

    async def create_outline(
        self,
        analysis: str,
        audience: Audience,
        tone: Tone,
        topic: str,
        instructions: Optional[str] = None,
    ) -> ArticleOutline:
        prompt = build_outline_prompt(analysis, audience, tone, topic, instructions)
        text = await self._call("create_outline", prompt, temperature=0.5)
        try:
            return parse_outline(text, topic)
        except ValueError as e:
            raise ProviderError("create_outline", str(e)) from e

    async def write_article(
        self,
        outline: ArticleOutline,
        target_length: int,
        tone: Tone,
        audience: Audience,
        instructions: Optional[str] = None,
    ) -> str:
        prompt = build_article_prompt(outline, target_length, tone, audience, instructions)
        text = await self._call("write_article", prompt, temperature=0.8)
        return strip_code_fence(text)

    async def create_image_prompt(self, title: str, content: str, image_theme: str = "") -> str:
        prompt = build_image_prompt_prompt(title, content, image_theme)
        return (await self._call("create_image_prompt", prompt, temperature=0.7, max_tokens=300)).strip()

    async def generate_image(self, prompt: str) -> str:
        logger.info("[PROVIDER] generate_image via %s", self.image_model)
        try:
            return await generate_image_async(self.image_model, prompt)
        except Exception as e:
            logger.error("[PROVIDER] generate_image failed: %s", e)
            raise ProviderError("generate_image", str(e)) from e

    async def generate_social_posts(
        self,
        topic: str,
        title: str,
        summary: str,
        tone: Tone,
        target_audiences: list[str],
    ) -> SocialPostSet:
        prompt = build_social_prompt(topic, title, summary, tone, target_audiences)
        text = await self._call("generate_social_posts", prompt, temperature=0.9)
        try:
            return parse_social_posts(text)
        except ValueError as e:
            raise ProviderError("generate_social_posts", str(e)) from e
