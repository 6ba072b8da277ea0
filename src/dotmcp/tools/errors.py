"""Errors raised by tool callables.

Tools report failures with these types; the protocol engine maps them onto
JSON-RPC error responses at the dispatch boundary.
"""

from __future__ import annotations

from typing import Any


class ToolError(Exception):
    """A domain operation failed (file missing, binary missing, rejected input)."""

    def __init__(self, message: str, data: Any = None) -> None:
        self.data = data
        super().__init__(message)


class InvalidArgumentError(ToolError):
    """A required argument is missing or has the wrong type."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid argument '{name}': {reason}", data={"argument": name})


class CommandTimeoutError(ToolError):
    """An external command exceeded its time budget."""

    def __init__(self, command: str, timeout: float) -> None:
        self.command = command
        self.timeout = timeout
        super().__init__(
            f"Command timed out after {timeout}s: {command}",
            data={"command": command, "timeout": timeout},
        )
