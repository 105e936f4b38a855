"""Article studio: AI article pipeline with human review and variant comparison."""

from .approval import ApprovalConfiguration, ApprovalWorkflowEngine, ReviewedPipeline, UserFeedback
from .errors import ArticleStudioError, StageError
from .pipeline import PipelineArtifact, PipelineOrchestrator, PipelineRequest
from .variants import ComparisonAnalyzer, VariantGenerationCoordinator, VariationType

__version__ = "0.1.0"

__all__ = [
    "ApprovalConfiguration",
    "ApprovalWorkflowEngine",
    "ArticleStudioError",
    "ComparisonAnalyzer",
    "PipelineArtifact",
    "PipelineOrchestrator",
    "PipelineRequest",
    "ReviewedPipeline",
    "StageError",
    "UserFeedback",
    "VariantGenerationCoordinator",
    "VariationType",
]
