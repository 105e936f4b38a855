"""Generation provider for Claude models via the Anthropic SDK.

Text stages go through the Messages API; images still go through the
configured LiteLLM image model since Claude does not generate images.
"""

from typing import Optional

import anthropic

from ..config.settings import settings
from .prompted_provider import PromptedGenerationProvider


class AnthropicGenerationProvider(PromptedGenerationProvider):
    """Generation provider using the Anthropic SDK for Claude models."""

    def __init__(
        self,
        client: Optional[anthropic.AsyncAnthropic] = None,
        model_id: str = "claude-sonnet-4-20250514",
        image_model: str = settings.image_model,
        max_tokens: int = settings.max_tokens,
    ):
        """
        Initialize Anthropic provider.

        Args:
            client: Anthropic async API client (created from settings if omitted)
            model_id: Claude model to use for all text stages
            image_model: LiteLLM image model identifier
            max_tokens: Maximum tokens for response
        """
        super().__init__(model_id=model_id, image_model=image_model, max_tokens=max_tokens)
        self.client = client or anthropic.AsyncAnthropic(
            api_key=settings.anthropic_api_key or None
        )

    async def _complete(self, prompt: str, temperature: float, max_tokens: int) -> str:
        response = await self.client.messages.create(
            model=self.model_id,
            max_tokens=max_tokens,
            temperature=temperature,
            messages=[{"role": "user", "content": prompt}],
        )
        return self._extract_text(response)

    def _extract_text(self, response: anthropic.types.Message) -> str:
        """Extract text content from response."""
        for block in response.content:
            if block.type == "text":
                return block.text
        return ""
