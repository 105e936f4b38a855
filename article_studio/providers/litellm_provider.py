"""LiteLLM-based generation provider.

Uses LiteLLM to support Gemini, OpenAI, and other models for article generation.
"""

from ..config.settings import settings
from ..utils.llm_client import get_completion_async
from .prompted_provider import PromptedGenerationProvider


class LiteLLMGenerationProvider(PromptedGenerationProvider):
    """Generation provider using LiteLLM for Gemini and other non-Anthropic models."""

    def __init__(
        self,
        model_id: str = settings.generation_model,
        image_model: str = settings.image_model,
        max_tokens: int = settings.max_tokens,
    ):
        """
        Initialize LiteLLM provider.

        Args:
            model_id: LiteLLM model identifier (e.g., "gemini/gemini-2.5-flash")
            image_model: LiteLLM image model identifier
            max_tokens: Maximum tokens for text responses
        """
        super().__init__(model_id=model_id, image_model=image_model, max_tokens=max_tokens)

    async def _complete(self, prompt: str, temperature: float, max_tokens: int) -> str:
        return await get_completion_async(
            model=self.model_id,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=max_tokens,
            temperature=temperature,
        )
