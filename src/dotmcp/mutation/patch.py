"""Line-oriented, best-effort patch merge.

Patch lines are interpreted by their first character:

* ``+`` adds the rest of the line just before the next ``-`` or context
  line, or after the last one when none follows (at the start of the file
  when the patch has no ``-`` or context lines at all)
* ``-`` removes the next line equal to the rest of the line
* a leading space copies through the next line equal to the rest of the line

``---``, ``+++`` and ``@@`` header lines are skipped.  Any other line
(including blank lines and ``\\ No newline at end of file``) is ignored.
Lines of the current content not mentioned by the patch are kept in place.
Comparison ignores trailing whitespace.
"""

from __future__ import annotations

from dotmcp.mutation.errors import PatchError
from dotmcp.mutation.models import MAX_PATCH_SIZE

_HEADER_PREFIXES = ("---", "+++", "@@")


def check_patch(patch: str, max_size: int = MAX_PATCH_SIZE) -> None:
    """Reject empty, oversized or binary patch text."""
    if len(patch) > max_size:
        raise PatchError(f"patch exceeds maximum size of {max_size} characters")
    if "\0" in patch:
        raise PatchError("patch contains a null byte")
    if not patch.strip():
        raise PatchError("patch is empty")


def apply_patch(current: str, patch: str) -> str:
    """Merge *patch* into *current* and return the candidate content.

    Raises:
        PatchError: A ``-`` or context line does not match any remaining line.
    """
    source = current.splitlines()
    result: list[str] = []
    added: list[str] = []
    cursor = 0

    for number, line in enumerate(patch.splitlines(), start=1):
        if line.startswith(_HEADER_PREFIXES):
            continue
        marker, body = line[:1], line[1:]

        if marker == "+":
            added.append(body)
        elif marker in ("-", " "):
            found = _find(source, body, cursor)
            if found is None:
                kind = "removed" if marker == "-" else "context"
                raise PatchError(f"{kind} line not found: {body!r}", line_number=number)
            result.extend(source[cursor:found])
            result.extend(added)
            added.clear()
            if marker == " ":
                result.append(source[found])
            cursor = found + 1
        # anything else is ignored

    result.extend(added)
    result.extend(source[cursor:])

    if not result:
        return ""
    trailing = "\n" if (current.endswith("\n") or not current) else ""
    return "\n".join(result) + trailing


def _find(lines: list[str], wanted: str, start: int) -> int | None:
    target = wanted.rstrip()
    for index in range(start, len(lines)):
        if lines[index].rstrip() == target:
            return index
    return None
