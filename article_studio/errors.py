"""Exception types raised by the article studio."""

from typing import Optional


class ArticleStudioError(Exception):
    """Base class for all article studio errors."""


class ProviderError(ArticleStudioError):
    """An external generation, search or storage provider call failed."""

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation


class StageError(ArticleStudioError):
    """One pipeline stage failed, aborting the run it belongs to."""

    def __init__(self, stage_name: str, cause: BaseException):
        super().__init__(f"Stage '{stage_name}' failed: {cause!r}")
        self.stage_name = stage_name
        self.cause = cause


class NotFoundError(ArticleStudioError):
    """An unknown id was passed to the workflow engine or a store."""


class WorkflowNotFound(NotFoundError):
    def __init__(self, workflow_id: str):
        super().__init__(f"Workflow not found: {workflow_id}")
        self.workflow_id = workflow_id


class StepNotFound(NotFoundError):
    def __init__(self, workflow_id: str, step_ref: str):
        super().__init__(f"Step not found in workflow {workflow_id}: {step_ref}")
        self.workflow_id = workflow_id
        self.step_ref = step_ref


class InvalidConfiguration(ArticleStudioError, ValueError):
    """Configuration or request parameters cannot be used."""


class InvalidFeedback(ArticleStudioError, ValueError):
    """Reviewer feedback does not satisfy the workflow's rules."""


class InvalidStepContent(ArticleStudioError, ValueError):
    """Step content has the wrong kind or was already set."""


class StepAlreadyResolved(ArticleStudioError):
    """A step that already carries a decision was resolved again."""

    def __init__(self, step_id: str, status: str):
        super().__init__(f"Step {step_id} is already resolved ({status})")
        self.step_id = step_id
        self.status = status


class WorkflowClosed(ArticleStudioError):
    """The workflow reached a terminal status and accepts no more decisions."""

    def __init__(self, workflow_id: str, status: str):
        super().__init__(f"Workflow {workflow_id} is closed ({status})")
        self.workflow_id = workflow_id
        self.status = status


class VariantFailure(ArticleStudioError):
    """Generation of a single variant failed. Recorded on the variant, never raised to callers."""

    def __init__(self, variant_name: str, cause: Optional[BaseException] = None):
        super().__init__(f"Variant {variant_name} failed: {cause!r}")
        self.variant_name = variant_name
        self.cause = cause


class IncomparableVariants(ArticleStudioError, ValueError):
    """Comparison was requested for a variant that has not completed."""
