"""Parallel generation and comparison of article variants."""

from .comparison import Comparison, ComparisonAnalyzer, MetricPair
from .coordinator import VariantGenerationCoordinator
from .models import Variant, VariantParameters, VariantSet, VariantStatus, VariationType
from .strategies import STRATEGIES, derive_variants

__all__ = [
    "STRATEGIES",
    "Comparison",
    "ComparisonAnalyzer",
    "MetricPair",
    "Variant",
    "VariantGenerationCoordinator",
    "VariantParameters",
    "VariantSet",
    "VariantStatus",
    "VariationType",
    "derive_variants",
]
