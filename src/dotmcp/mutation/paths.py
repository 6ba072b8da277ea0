"""Path checks that run before the pipeline touches the filesystem."""

from __future__ import annotations

from pathlib import Path, PurePath

from dotmcp.mutation.errors import PathValidationError

MAX_PATH_LENGTH = 4096


def check_path_text(raw: str) -> None:
    """Reject path strings that are unsafe regardless of where they point."""
    if not raw or not raw.strip():
        raise PathValidationError(raw, "path is empty")
    if len(raw) > MAX_PATH_LENGTH:
        raise PathValidationError(raw[:64] + "...", f"exceeds {MAX_PATH_LENGTH} characters")
    if "\0" in raw:
        raise PathValidationError(raw.replace("\0", "\\0"), "contains a null byte")
    if ".." in PurePath(raw).parts:
        raise PathValidationError(raw, "parent-directory segments are not allowed")


def resolve_within(raw: str, base_dir: Path) -> Path:
    """Validate *raw* and resolve it against *base_dir*.

    Relative paths are joined onto *base_dir*; ``~`` is expanded.  The fully
    resolved path (symlinks included) must stay inside the resolved base.
    """
    check_path_text(raw)

    candidate = Path(raw).expanduser()
    if not candidate.is_absolute():
        candidate = base_dir / candidate

    base = base_dir.expanduser().resolve()
    resolved = candidate.resolve()
    if resolved != base and base not in resolved.parents:
        raise PathValidationError(raw, f"outside of allowed directory {base}")
    if resolved == base:
        raise PathValidationError(raw, "refers to the base directory itself")
    return resolved
