"""Safe mutation pipeline: validate, diff, back up, atomically replace."""

from dotmcp.mutation.errors import (
    MutationError,
    MutationPipelineError,
    PatchError,
    PathValidationError,
)
from dotmcp.mutation.models import (
    ContentValidator,
    MutationOutcome,
    MutationPolicy,
    ValidationReport,
)
from dotmcp.mutation.pipeline import MutationPipeline

__all__ = [
    "ContentValidator",
    "MutationError",
    "MutationOutcome",
    "MutationPipeline",
    "MutationPipelineError",
    "MutationPolicy",
    "PatchError",
    "PathValidationError",
    "ValidationReport",
]
