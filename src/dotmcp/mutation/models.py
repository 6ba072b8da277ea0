"""Data models for the mutation pipeline."""

from __future__ import annotations

from collections.abc import Callable

from pydantic import BaseModel, Field

MAX_PATCH_SIZE = 1_000_000


class ValidationReport(BaseModel):
    """Result of checking configuration content against a domain's rules."""

    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


ContentValidator = Callable[[str], ValidationReport]


class MutationPolicy(BaseModel):
    """Per-tool choices for how strict the pipeline is."""

    backup_required: bool = Field(
        default=False,
        description="Abort the write when the backup cannot be created.",
    )
    allow_create: bool = Field(
        default=False,
        description="Treat a missing target as empty instead of rejecting it.",
    )
    max_patch_size: int = Field(default=MAX_PATCH_SIZE, gt=0)


class MutationOutcome(BaseModel):
    """What a pipeline run did (or, on dry-run, would do)."""

    success: bool
    path: str
    diff: str = ""
    dry_run: bool = True
    backup_created: bool = False
    backup_path: str | None = None
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
