"""Backup and atomic-replace primitives.

``atomic_write`` writes to a temporary file in the target's directory and
renames it over the target.  The rename is the only step that makes new
content visible, so an interrupted write leaves the original file intact.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)


def default_backup_path(target: Path, now: datetime | None = None) -> Path:
    """Return ``<target>.backup.<timestamp>`` next to *target*, avoiding collisions."""
    stamp = (now or datetime.now()).strftime("%Y%m%d%H%M%S")
    candidate = target.with_name(f"{target.name}.backup.{stamp}")
    counter = 1
    while candidate.exists():
        candidate = target.with_name(f"{target.name}.backup.{stamp}.{counter}")
        counter += 1
    return candidate


def backup_file(target: Path, backup_path: Path | None = None) -> Path:
    """Copy *target* to *backup_path* (or a timestamped sibling).

    Returns the path of the copy, which is inside *backup_path* when that is
    an existing directory.

    Raises:
        OSError: The copy failed.
    """
    destination = backup_path or default_backup_path(target)
    destination.parent.mkdir(parents=True, exist_ok=True)
    # copy2 writes into an existing directory as <dir>/<target.name>
    written = Path(shutil.copy2(target, destination))
    logger.debug("Backed up %s to %s", target, written)
    return written


def atomic_write(target: Path, content: str) -> None:
    """Replace *target* with *content* via temp file + ``os.replace``.

    Keeps the permission bits of an existing target.

    Raises:
        OSError: Writing or renaming failed; *target* is unchanged.
    """
    directory = target.parent
    fd, temp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=directory)
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        if target.exists():
            shutil.copymode(target, temp_path)
        os.replace(temp_path, target)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise
    logger.debug("Wrote %d characters to %s", len(content), target)
