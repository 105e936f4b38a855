"""Unified LLM client using LiteLLM.

Provides a single interface for text and image generation across providers
(Google, Anthropic, OpenAI, etc.)
"""

import logging
from typing import Optional

import litellm

# Suppress verbose LiteLLM logging
litellm.set_verbose = False
logging.getLogger("LiteLLM").setLevel(logging.WARNING)


async def get_completion_async(
    model: str,
    messages: list[dict],
    max_tokens: int = 4096,
    temperature: float = 0.3,
    response_format: Optional[dict] = None,
) -> str:
    """
    Get completion from any supported model via LiteLLM.

    Args:
        model: Model identifier. Examples:
            - "gemini/gemini-2.5-flash" (Google)
            - "claude-sonnet-4-20250514" (Anthropic)
            - "gpt-4o" (OpenAI)
        messages: List of message dicts with role and content
        max_tokens: Maximum response tokens
        temperature: Sampling temperature (0.0-2.0)
        response_format: Optional response format (e.g., {"type": "json_object"})

    Returns:
        Response text content (empty string when the model returns none)
    """
    kwargs = {
        "model": model,
        "messages": messages,
        "max_tokens": max_tokens,
        "temperature": temperature,
    }

    if response_format:
        kwargs["response_format"] = response_format

    response = await litellm.acompletion(**kwargs)
    return response.choices[0].message.content or ""


async def generate_image_async(model: str, prompt: str) -> str:
    """
    Generate a single image via LiteLLM.

    Args:
        model: Image model identifier (e.g. "gemini/imagen-4.0-generate-001")
        prompt: Image prompt

    Returns:
        Hosted image URL, or a base64 data URL when the provider returns raw bytes

    Raises:
        ValueError: If the response carries no image
    """
    response = await litellm.aimage_generation(model=model, prompt=prompt, n=1)
    if not response.data:
        raise ValueError(f"No image returned by {model}")

    image = response.data[0]
    url = getattr(image, "url", None)
    if url:
        return url
    b64 = getattr(image, "b64_json", None)
    if b64:
        return f"data:image/png;base64,{b64}"
    raise ValueError(f"Image response from {model} has neither url nor b64_json")
