"""Generation and fact-check providers."""

from ..config.settings import settings
from .anthropic_provider import AnthropicGenerationProvider
from .base import FactCheckProvider, GenerationProvider
from .litellm_provider import LiteLLMGenerationProvider
from .tavily_fact_checker import TavilyFactChecker


def create_generation_provider(model_id: str = settings.generation_model) -> GenerationProvider:
    """Pick the provider for a model id.

    Claude models go through the Anthropic SDK, everything else through LiteLLM.
    """
    if model_id.startswith("claude"):
        return AnthropicGenerationProvider(model_id=model_id)
    return LiteLLMGenerationProvider(model_id=model_id)


__all__ = [
    "AnthropicGenerationProvider",
    "FactCheckProvider",
    "GenerationProvider",
    "LiteLLMGenerationProvider",
    "TavilyFactChecker",
    "create_generation_provider",
]
