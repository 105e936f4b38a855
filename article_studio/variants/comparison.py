"""Heuristic scoring and pairwise comparison of generated variants.

All scores are deterministic functions of the variant's content and
parameters, so comparing the same pair twice yields identical metrics.
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from ..config.settings import settings
from ..errors import IncomparableVariants
from ..pipeline.models import Tone
from .models import Variant, VariantStatus

_SENTENCE_BOUNDARY = re.compile(r"[.!?。！？]")
_HEADING = re.compile(r"^#+\s", re.MULTILINE)
_LINK = re.compile(r"\[.*?\]\(.*?\)")
_IMAGE = re.compile(r"!\[.*?\]\(.*?\)")

# Weights of the overall score used to break readability ties
OVERALL_WEIGHTS = {"readability": 0.4, "seo": 0.3, "engagement": 0.3}


@dataclass
class MetricPair:
    a: float
    b: float


@dataclass
class Comparison:
    """Side-by-side metrics for two completed variants."""

    variant_a: Variant
    variant_b: Variant
    metrics: dict[str, MetricPair] = field(default_factory=dict)
    overall: Optional[MetricPair] = None
    recommended_variant_id: str = ""
    recommendation: str = ""

    @property
    def recommended_variant(self) -> Variant:
        return self.variant_a if self.recommended_variant_id == self.variant_a.id else self.variant_b


class ComparisonAnalyzer:
    """Scores variants and picks recommendations."""

    def __init__(self, optimal_sentence_length: int = settings.optimal_sentence_length):
        self.optimal_sentence_length = optimal_sentence_length

    def readability_score(self, content: str) -> float:
        """
        Score average sentence length against the optimum.

        100 at the optimum, losing 50 points per optimum-length of distance,
        floored at 0.
        """
        sentences = len(_SENTENCE_BOUNDARY.split(content))
        average = len(content) / max(sentences, 1)
        penalty = abs(average - self.optimal_sentence_length) / self.optimal_sentence_length
        return max(0.0, 100 - penalty * 50)

    def seo_score(self, content: str) -> float:
        headings = len(_HEADING.findall(content))
        links = len(_LINK.findall(content))
        images = len(_IMAGE.findall(content))

        score = 50
        score += min(headings * 10, 30)
        score += min(links * 5, 15)
        score += min(images * 5, 15)
        return float(min(score, 100))

    def predict_engagement(self, variant: Variant) -> float:
        score = 50
        if variant.parameters.tone == Tone.FRIENDLY:
            score += 20
        elif variant.parameters.tone == Tone.PROFESSIONAL:
            score += 10

        length = len(variant.output.content) if variant.output else 0
        if 3000 <= length <= 7000:
            score += 15
        return float(min(score, 100))

    def recommendation_score(self, variant: Variant) -> float:
        """Content length per second of generation time."""
        length = len(variant.output.content) if variant.output else 0
        generation_time = variant.generation_time_seconds
        if generation_time is None:
            generation_time = float("inf")
        return length / max(generation_time, 1)

    def select_recommended(self, variants: list[Variant]) -> Optional[str]:
        """Id of the completed variant with the highest recommendation score, first wins ties."""
        best: Optional[Variant] = None
        best_score = float("-inf")
        for variant in variants:
            if variant.status != VariantStatus.COMPLETED:
                continue
            score = self.recommendation_score(variant)
            if score > best_score:
                best, best_score = variant, score
        return best.id if best is not None else None

    def compare_versions(self, variant_a: Variant, variant_b: Variant) -> Comparison:
        """
        Compare two completed variants.

        The recommendation names the more readable variant. Exact
        readability ties go to the higher weighted overall score, then to A.

        Raises:
            IncomparableVariants: Either variant is not COMPLETED
        """
        for variant in (variant_a, variant_b):
            if variant.status != VariantStatus.COMPLETED or variant.output is None:
                raise IncomparableVariants(
                    f"Variant {variant.name} is {variant.status.value}, only completed variants can be compared"
                )

        content_a, content_b = variant_a.output.content, variant_b.output.content
        metrics = {
            "readability": MetricPair(self.readability_score(content_a), self.readability_score(content_b)),
            "seo": MetricPair(self.seo_score(content_a), self.seo_score(content_b)),
            "engagement": MetricPair(self.predict_engagement(variant_a), self.predict_engagement(variant_b)),
            "length": MetricPair(len(content_a), len(content_b)),
        }
        overall = MetricPair(
            a=round(sum(metrics[k].a * w for k, w in OVERALL_WEIGHTS.items()), 2),
            b=round(sum(metrics[k].b * w for k, w in OVERALL_WEIGHTS.items()), 2),
        )

        readability = metrics["readability"]
        if readability.a != readability.b:
            winner = variant_a if readability.a > readability.b else variant_b
        else:
            winner = variant_b if overall.b > overall.a else variant_a

        return Comparison(
            variant_a=variant_a,
            variant_b=variant_b,
            metrics=metrics,
            overall=overall,
            recommended_variant_id=winner.id,
            recommendation=(
                f"Version {winner.name} is easier to read and is predicted to get more engagement."
            ),
        )
