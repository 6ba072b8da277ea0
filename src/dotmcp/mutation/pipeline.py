"""MutationPipeline: apply a patch to a configuration file without corrupting it.

Steps, each a precondition for the next:

1. resolve and validate the path against the base directory
2. read the current content (missing file -> empty, if the policy allows)
3. merge the patch into a candidate
4. validate the candidate with the domain's validator
5. render a unified diff
6. stop here on dry-run
7. back up the existing file
8. atomically replace the target

Failures in steps 1-4 return an unsuccessful :class:`MutationOutcome` and
touch nothing.  Failures in steps 7-8 raise :class:`MutationError`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from dotmcp.mutation.diff import unified_diff
from dotmcp.mutation.errors import MutationError, PatchError, PathValidationError
from dotmcp.mutation.files import atomic_write, backup_file
from dotmcp.mutation.models import ContentValidator, MutationOutcome, MutationPolicy
from dotmcp.mutation.patch import apply_patch, check_patch
from dotmcp.mutation.paths import resolve_within
from dotmcp.utils.telemetry import (
    ATTR_MUTATION_BACKUP,
    ATTR_MUTATION_DRY_RUN,
    ATTR_MUTATION_PATH,
    ATTR_MUTATION_SUCCESS,
    get_tracer,
)

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)


class MutationPipeline:
    """Validate -> diff -> backup -> atomic replace, for one domain.

    Usage::

        pipeline = MutationPipeline(base_dir, validate_wofi_config)
        outcome = pipeline.run("wofi/config", patch, dry_run=False)
    """

    def __init__(
        self,
        base_dir: Path,
        validator: ContentValidator,
        policy: MutationPolicy | None = None,
    ) -> None:
        self._base_dir = base_dir
        self._validator = validator
        self._policy = policy or MutationPolicy()

    @property
    def policy(self) -> MutationPolicy:
        return self._policy

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def run(
        self,
        path: str,
        patch: str,
        *,
        dry_run: bool = True,
        backup_path: str | None = None,
    ) -> MutationOutcome:
        """Run the pipeline for *path*.  See the module docstring for the steps."""
        with _tracer.start_as_current_span("dotmcp.mutation.run") as span:
            span.set_attribute(ATTR_MUTATION_PATH, path)
            span.set_attribute(ATTR_MUTATION_DRY_RUN, dry_run)
            outcome = self._run(path, patch, dry_run=dry_run, backup_path=backup_path)
            span.set_attribute(ATTR_MUTATION_SUCCESS, outcome.success)
            span.set_attribute(ATTR_MUTATION_BACKUP, outcome.backup_created)
            return outcome

    def _run(
        self,
        path: str,
        patch: str,
        *,
        dry_run: bool,
        backup_path: str | None,
    ) -> MutationOutcome:
        def reject(reason: str, diff: str = "", warnings: list[str] | None = None) -> MutationOutcome:
            logger.info("Mutation of %s rejected: %s", path, reason)
            return MutationOutcome(
                success=False,
                path=path,
                diff=diff,
                dry_run=dry_run,
                errors=[reason],
                warnings=warnings or [],
            )

        # 1. path
        try:
            target = resolve_within(path, self._base_dir)
            backup_target = (
                resolve_within(backup_path, self._base_dir) if backup_path else None
            )
            check_patch(patch, self._policy.max_patch_size)
        except (PathValidationError, PatchError) as exc:
            return reject(str(exc))

        # 2. current content
        exists = target.exists()
        if exists:
            try:
                current = target.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                return reject(f"Cannot read {target}: {exc}")
        elif self._policy.allow_create:
            current = ""
        else:
            return reject(f"File does not exist: {target}")

        # 3. candidate
        try:
            candidate = apply_patch(current, patch)
        except PatchError as exc:
            return reject(str(exc))

        # 4-5. validate and diff
        label = target.relative_to(self._base_dir.expanduser().resolve()).as_posix()
        diff = unified_diff(current, candidate, label)
        report = self._validator(candidate)
        if not report.success:
            logger.info("Candidate for %s failed validation: %s", target, report.errors)
            return MutationOutcome(
                success=False,
                path=str(target),
                diff=diff,
                dry_run=dry_run,
                errors=report.errors,
                warnings=report.warnings,
            )

        # 6. dry-run
        if dry_run:
            return MutationOutcome(
                success=True,
                path=str(target),
                diff=diff,
                dry_run=True,
                warnings=report.warnings,
            )

        # 7. backup
        backup_created = False
        written_backup: Path | None = None
        if exists:
            try:
                written_backup = backup_file(target, backup_target)
                backup_created = True
            except OSError as exc:
                if self._policy.backup_required:
                    raise MutationError(target, "backup", str(exc)) from exc
                logger.warning("Backup of %s failed, continuing: %s", target, exc)

        # 8. atomic replace
        try:
            if not exists:
                target.parent.mkdir(parents=True, exist_ok=True)
            atomic_write(target, candidate)
        except OSError as exc:
            raise MutationError(target, "write", str(exc)) from exc

        logger.info(
            "Applied patch to %s (backup: %s)",
            target,
            written_backup if written_backup else "none",
        )
        return MutationOutcome(
            success=True,
            path=str(target),
            diff=diff,
            dry_run=False,
            backup_created=backup_created,
            backup_path=str(written_backup) if written_backup else None,
            warnings=report.warnings,
        )
