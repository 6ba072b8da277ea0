"""Tool registry and the helpers tool callables are written with."""

from dotmcp.tools.errors import CommandTimeoutError, InvalidArgumentError, ToolError
from dotmcp.tools.registry import (
    RegistryBuilder,
    ToolEntry,
    ToolHandler,
    ToolRegistry,
    registry_from_specs,
)

__all__ = [
    "CommandTimeoutError",
    "InvalidArgumentError",
    "RegistryBuilder",
    "ToolEntry",
    "ToolError",
    "ToolHandler",
    "ToolRegistry",
    "registry_from_specs",
]
