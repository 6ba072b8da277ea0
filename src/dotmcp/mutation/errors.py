"""Error types for the safe mutation pipeline."""

from __future__ import annotations

from pathlib import Path


class MutationPipelineError(Exception):
    """Base error for all mutation pipeline failures."""


class PathValidationError(MutationPipelineError):
    """A target or backup path was rejected before any file was touched."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid path {path!r}: {reason}")


class PatchError(MutationPipelineError):
    """The patch could not be merged into the current content."""

    def __init__(self, detail: str, line_number: int | None = None) -> None:
        self.detail = detail
        self.line_number = line_number
        where = f" (patch line {line_number})" if line_number is not None else ""
        super().__init__(f"Cannot apply patch{where}: {detail}")


class MutationError(MutationPipelineError):
    """Backup or write failed after validation succeeded.

    The target file is never left half-written when this is raised.
    """

    def __init__(self, path: Path, stage: str, detail: str = "") -> None:
        self.path = path
        self.stage = stage
        self.detail = detail
        super().__init__(f"{stage} failed for {path}" + (f": {detail}" if detail else ""))
