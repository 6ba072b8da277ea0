"""Helpers for pulling typed values out of a tool's ``arguments`` object."""

from __future__ import annotations

from typing import Any

from dotmcp.tools.errors import InvalidArgumentError

MAX_STRING_LENGTH = 10_000


def optional_str(
    arguments: dict[str, Any],
    key: str,
    *,
    max_length: int = MAX_STRING_LENGTH,
) -> str | None:
    """Return ``arguments[key]`` as a string, or ``None`` if absent or null."""
    value = arguments.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidArgumentError(key, "must be a string")
    if len(value) > max_length:
        raise InvalidArgumentError(key, f"exceeds maximum length of {max_length} characters")
    if "\0" in value:
        raise InvalidArgumentError(key, "contains a null byte")
    return value


def required_str(
    arguments: dict[str, Any],
    key: str,
    *,
    max_length: int = MAX_STRING_LENGTH,
) -> str:
    value = optional_str(arguments, key, max_length=max_length)
    if value is None:
        raise InvalidArgumentError(key, "is required")
    return value


def optional_bool(arguments: dict[str, Any], key: str, *, default: bool) -> bool:
    """Return ``arguments[key]`` as a bool.

    Accepts the strings ``"true"``/``"false"`` as a best-effort coercion,
    since some callers stringify every argument.
    """
    value = arguments.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
        return value.strip().lower() == "true"
    raise InvalidArgumentError(key, "must be a boolean")
