"""JSON extraction shared by the provider adapters."""

import json
import re
from typing import Optional

_JSON_PATTERNS = [
    r"```json\s*([\s\S]*?)\s*```",
    r"```\s*([\s\S]*?)\s*```",
    r"\{[\s\S]*\}",
    r"\[[\s\S]*\]",
]


def extract_json(text: str) -> Optional[dict | list]:
    """
    Extract and parse JSON from model output.

    Handles common cases:
    - Pure JSON response
    - JSON wrapped in markdown code blocks
    - JSON embedded in text

    Returns:
        Parsed JSON as dict/list, or None if parsing fails
    """
    if not text:
        return None

    # Try direct parse first
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    for pattern in _JSON_PATTERNS:
        match = re.search(pattern, text)
        if match:
            try:
                return json.loads(match.group(1) if "```" in pattern else match.group(0))
            except (json.JSONDecodeError, IndexError):
                continue

    return None


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ```markdown fence if the model added one."""
    stripped = text.strip()
    if stripped.startswith("```"):
        first_nl = stripped.find("\n")
        stripped = stripped[first_nl + 1:] if first_nl != -1 else stripped[3:]
        if stripped.rstrip().endswith("```"):
            stripped = stripped.rstrip()[:-3]
    return stripped.strip()
