"""dotmcp: MCP tool servers for dotfile configuration."""

from __future__ import annotations

__version__ = "0.1.0"
