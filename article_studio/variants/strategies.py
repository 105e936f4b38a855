"""Variation strategies.

Each strategy is a pure function of the base request that returns the
variant descriptors it contributes, named A, B, C in order. Instruction
presets for STRUCTURE and ANGLE are loaded from ``config/variations.yaml``.
"""

import string
from functools import lru_cache
from pathlib import Path
from typing import Callable, Iterable

import yaml

from ..config.settings import settings
from ..errors import InvalidConfiguration
from ..pipeline.models import Audience, PipelineRequest, Tone
from .models import Variant, VariantParameters, VariationType

TONE_VALUES = (Tone.POLITE, Tone.FRIENDLY, Tone.PROFESSIONAL)
LENGTH_VALUES = (2500, 5000, 10000)
AUDIENCE_VALUES = (Audience.BEGINNER, Audience.INTERMEDIATE, Audience.EXPERT)


def variant_name(index: int) -> str:
    """A, B, ..., Z, AA, AB, ..."""
    letters = string.ascii_uppercase
    name = ""
    index += 1
    while index > 0:
        index, rem = divmod(index - 1, 26)
        name = letters[rem] + name
    return name


@lru_cache(maxsize=4)
def load_presets(path: Path = settings.variations_file) -> dict:
    """Load instruction presets for the STRUCTURE and ANGLE strategies."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    for key in ("structure", "angle"):
        if not data.get(key):
            raise InvalidConfiguration(f"No '{key}' presets in {path}")
    return data


def _parameters(request: PipelineRequest, **overrides) -> VariantParameters:
    values = {
        "tone": request.tone,
        "audience": request.audience,
        "target_length": request.target_length,
        "instructions": request.instructions,
    }
    values.update(overrides)
    return VariantParameters(**values)


def tone_variants(request: PipelineRequest) -> list[Variant]:
    return [
        Variant(
            name=variant_name(i),
            description=f"Written in a {tone.value} tone",
            parameters=_parameters(request, tone=tone),
        )
        for i, tone in enumerate(TONE_VALUES)
    ]


def length_variants(request: PipelineRequest) -> list[Variant]:
    return [
        Variant(
            name=variant_name(i),
            description=f"{length:,} character version",
            parameters=_parameters(request, target_length=length),
        )
        for i, length in enumerate(LENGTH_VALUES)
    ]


def _instruction_variants(request: PipelineRequest, presets: list[dict]) -> list[Variant]:
    return [
        Variant(
            name=variant_name(i),
            description=preset["description"],
            parameters=_parameters(request, instructions=preset["instruction"]),
        )
        for i, preset in enumerate(presets)
    ]


def structure_variants(request: PipelineRequest) -> list[Variant]:
    return _instruction_variants(request, load_presets()["structure"])


def angle_variants(request: PipelineRequest) -> list[Variant]:
    return _instruction_variants(request, load_presets()["angle"])


def target_variants(request: PipelineRequest) -> list[Variant]:
    return [
        Variant(
            name=variant_name(i),
            description=f"For {audience.value} readers",
            parameters=_parameters(request, audience=audience),
        )
        for i, audience in enumerate(AUDIENCE_VALUES)
    ]


STRATEGIES: dict[VariationType, Callable[[PipelineRequest], list[Variant]]] = {
    VariationType.TONE: tone_variants,
    VariationType.LENGTH: length_variants,
    VariationType.STRUCTURE: structure_variants,
    VariationType.ANGLE: angle_variants,
    VariationType.TARGET: target_variants,
}


def normalize_variation_types(variation_types: Iterable) -> list[VariationType]:
    """Coerce to VariationType, dropping repeats and keeping first-seen order."""
    types: list[VariationType] = []
    for value in variation_types:
        try:
            vt = VariationType(value)
        except ValueError as e:
            raise InvalidConfiguration(f"Unknown variation type: {value!r}") from e
        if vt not in types:
            types.append(vt)
    return types


def derive_variants(
    request: PipelineRequest,
    variant_count: int,
    variation_types: Iterable,
) -> list[Variant]:
    """
    Build the variant descriptors for a set.

    Strategies are applied in the order given and their variants
    concatenated, then truncated to ``variant_count``. Names are reassigned
    A, B, C... across the combined list so they stay unique.

    Raises:
        InvalidConfiguration: variant_count < 1, no strategies, or unknown strategy
    """
    if variant_count < 1:
        raise InvalidConfiguration("variant_count must be at least 1")
    types = normalize_variation_types(variation_types)
    if not types:
        raise InvalidConfiguration("At least one variation type is required")

    variants: list[Variant] = []
    for vt in types:
        variants.extend(STRATEGIES[vt](request))

    variants = variants[:variant_count]
    for i, variant in enumerate(variants):
        variant.name = variant_name(i)
    return variants
