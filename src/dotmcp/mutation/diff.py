"""Unified diff rendering for mutation previews."""

from __future__ import annotations

import difflib


def unified_diff(old: str, new: str, label: str, *, context: int = 3) -> str:
    """Return a unified diff of *old* -> *new*, or ``""`` when they are equal."""
    lines = difflib.unified_diff(
        old.splitlines(),
        new.splitlines(),
        fromfile=f"a/{label}",
        tofile=f"b/{label}",
        n=context,
        lineterm="",
    )
    rendered = "\n".join(lines)
    return rendered + "\n" if rendered else ""
