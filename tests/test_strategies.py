"""Tests for variation strategies and variant derivation."""

import pytest

from article_studio.errors import InvalidConfiguration
from article_studio.pipeline.models import Audience, Tone
from article_studio.variants import STRATEGIES, VariationType, derive_variants
from article_studio.variants.strategies import load_presets, variant_name


class TestVariantNames:

    def test_letters(self):
        assert [variant_name(i) for i in range(3)] == ["A", "B", "C"]

    def test_past_z(self):
        assert variant_name(25) == "Z"
        assert variant_name(26) == "AA"
        assert variant_name(27) == "AB"


class TestStrategies:

    def test_tone_variants(self, base_request):
        variants = derive_variants(base_request, 3, [VariationType.TONE])

        assert [v.name for v in variants] == ["A", "B", "C"]
        assert [v.parameters.tone for v in variants] == [Tone.POLITE, Tone.FRIENDLY, Tone.PROFESSIONAL]
        assert all(v.parameters.target_length == base_request.target_length for v in variants)

    def test_length_variants(self, base_request):
        variants = STRATEGIES[VariationType.LENGTH](base_request)
        assert [v.parameters.target_length for v in variants] == [2500, 5000, 10000]
        assert all(v.parameters.tone == base_request.tone for v in variants)

    def test_target_variants(self, base_request):
        variants = STRATEGIES[VariationType.TARGET](base_request)
        assert [v.parameters.audience for v in variants] == [
            Audience.BEGINNER,
            Audience.INTERMEDIATE,
            Audience.EXPERT,
        ]

    @pytest.mark.parametrize("variation_type", [VariationType.STRUCTURE, VariationType.ANGLE])
    def test_instruction_variants_use_presets(self, base_request, variation_type):
        presets = load_presets()[variation_type.value]
        variants = STRATEGIES[variation_type](base_request)

        assert [v.parameters.instructions for v in variants] == [p["instruction"] for p in presets]
        assert [v.description for v in variants] == [p["description"] for p in presets]
        assert len({v.parameters.instructions for v in variants}) == 3

    def test_strategies_are_pure(self, base_request):
        before = base_request.model_dump()
        first = STRATEGIES[VariationType.TONE](base_request)
        second = STRATEGIES[VariationType.TONE](base_request)

        assert base_request.model_dump() == before
        assert [v.parameters for v in first] == [v.parameters for v in second]
        assert {v.id for v in first}.isdisjoint({v.id for v in second})


class TestDeriveVariants:

    def test_strategies_concatenate_in_requested_order(self, base_request):
        variants = derive_variants(base_request, 5, [VariationType.LENGTH, VariationType.TONE])

        assert [v.name for v in variants] == ["A", "B", "C", "D", "E"]
        assert [v.parameters.target_length for v in variants[:3]] == [2500, 5000, 10000]
        assert [v.parameters.tone for v in variants[3:]] == [Tone.POLITE, Tone.FRIENDLY]

    def test_fewer_variants_than_requested(self, base_request):
        variants = derive_variants(base_request, 10, [VariationType.TONE])
        assert len(variants) == 3

    def test_truncated_to_count(self, base_request):
        variants = derive_variants(base_request, 2, [VariationType.TONE, VariationType.LENGTH])
        assert [v.parameters.tone for v in variants] == [Tone.POLITE, Tone.FRIENDLY]

    def test_duplicates_applied_once(self, base_request):
        variants = derive_variants(base_request, 10, [VariationType.TONE, "tone"])
        assert len(variants) == 3

    def test_string_types_accepted(self, base_request):
        variants = derive_variants(base_request, 3, ["target"])
        assert variants[2].parameters.audience == Audience.EXPERT

    @pytest.mark.parametrize("count", [0, -1])
    def test_count_below_one(self, base_request, count):
        with pytest.raises(InvalidConfiguration):
            derive_variants(base_request, count, [VariationType.TONE])

    def test_no_strategies(self, base_request):
        with pytest.raises(InvalidConfiguration):
            derive_variants(base_request, 3, [])

    def test_unknown_strategy(self, base_request):
        with pytest.raises(InvalidConfiguration):
            derive_variants(base_request, 3, ["colour"])

    def test_variant_request_keeps_base_fields(self, base_request):
        request = base_request.model_copy(update={"instructions": "Mention grinders"})
        tone_variant = derive_variants(request, 3, [VariationType.TONE])[1]
        angle_variant = derive_variants(request, 1, [VariationType.ANGLE])[0]

        derived = tone_variant.to_request(request)
        assert derived.topic == request.topic
        assert derived.image_theme == request.image_theme
        assert derived.tone == Tone.FRIENDLY
        assert derived.instructions == "Mention grinders"

        assert angle_variant.to_request(request).instructions != "Mention grinders"
