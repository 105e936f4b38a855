"""Prompt template loader.

Loads prompt templates from the templates/ directory and renders
them with provided variables using string.Template ($var syntax).

JSON braces in templates are preserved as-is; only $variable
placeholders are substituted.
"""

from functools import lru_cache
from pathlib import Path
from string import Template

_TEMPLATES_DIR = Path(__file__).parent / "templates"


@lru_cache(maxsize=32)
def _load_raw(name: str) -> str:
    """Load raw template text from file. Cached for performance."""
    path = _TEMPLATES_DIR / f"{name}.txt"
    if not path.exists():
        raise FileNotFoundError(f"Prompt template not found: {path}")
    return path.read_text(encoding="utf-8")


@lru_cache(maxsize=1)
def _load_writing_rules() -> str:
    """Load the shared writing rules preamble. Cached, loaded once."""
    path = _TEMPLATES_DIR / "writing_rules.txt"
    if not path.exists():
        return ""
    return path.read_text(encoding="utf-8")


def render(name: str, **kwargs: str) -> str:
    """Load a prompt template and render it with the given variables.

    Auto-injects $writing_rules from writing_rules.txt if the template
    uses it and the caller didn't provide an explicit value.

    Args:
        name: Template filename without extension (e.g. "outline")
        **kwargs: Template variables to substitute

    Returns:
        Rendered prompt string

    Raises:
        FileNotFoundError: If template file doesn't exist
        KeyError: If a required placeholder has no value provided
    """
    template_text = _load_raw(name)

    if "$writing_rules" in template_text and "writing_rules" not in kwargs:
        kwargs["writing_rules"] = _load_writing_rules()

    template = Template(template_text)
    return template.substitute(**kwargs)
