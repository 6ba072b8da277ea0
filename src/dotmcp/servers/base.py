"""Shared building blocks for domain servers.

Every domain server is a :class:`ServerDefinition`: a name, the binary it
configures, a default config file and a function that contributes its own
tools to a :class:`RegistryBuilder`.  The ``health``, ``*_validate`` and
``*_apply`` tools are the same everywhere and are built here.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotmcp import __version__
from dotmcp.config import ServerSettings, xdg_config_home
from dotmcp.mutation import (
    ContentValidator,
    MutationPipeline,
    MutationPipelineError,
    PathValidationError,
)
from dotmcp.mutation.models import MAX_PATCH_SIZE
from dotmcp.mutation.paths import MAX_PATH_LENGTH, resolve_within
from dotmcp.protocol.engine import ProtocolEngine
from dotmcp.protocol.models import ServerInfo
from dotmcp.tools.arguments import optional_bool, optional_str, required_str
from dotmcp.tools.errors import InvalidArgumentError, ToolError
from dotmcp.tools.registry import RegistryBuilder, ToolHandler, ToolRegistry
from dotmcp.utils.process import find_binary, run_command

EMPTY_SCHEMA: dict[str, Any] = {"type": "object", "properties": {}}


@dataclass(frozen=True)
class ServerDefinition:
    """Static description of one domain server."""

    name: str
    binary: str
    config_dir: str
    config_file: str
    validator: ContentValidator
    add_catalog_tools: Callable[[RegistryBuilder], None]
    instructions: str = ""

    @property
    def server_name(self) -> str:
        return f"{self.name}-mcp"

    def base_dir(self, settings: ServerSettings) -> Path:
        return settings.base_dir or xdg_config_home() / self.config_dir

    def build_registry(self, settings: ServerSettings) -> ToolRegistry:
        builder = RegistryBuilder()
        self.add_catalog_tools(builder)

        base_dir = self.base_dir(settings)
        builder.add(
            f"{self.name}_validate",
            f"Validate a {self.name} configuration file or inline content",
            validate_schema(self.config_file),
            make_validate_tool(self.validator, base_dir, self.config_file),
        )
        pipeline = MutationPipeline(base_dir, self.validator, settings.mutation_policy())
        builder.add(
            f"{self.name}_apply",
            f"Apply a line-oriented patch to a {self.name} configuration file "
            "with validation, unified diff, backup and atomic write",
            apply_schema(self.config_file),
            make_apply_tool(pipeline, self.config_file),
        )
        builder.add(
            "health",
            f"Report server version and whether {self.binary} is installed",
            EMPTY_SCHEMA,
            make_health_tool(self, settings.command_timeout),
        )
        return builder.build()

    def build_engine(self, settings: ServerSettings) -> ProtocolEngine:
        return ProtocolEngine(
            self.build_registry(settings),
            ServerInfo(name=self.server_name, version=__version__),
            instructions=self.instructions or None,
        )


def validate_schema(default_file: str) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "config_path": {
                "type": "string",
                "description": f"Config file, relative to the config directory (default: {default_file})",
            },
            "content": {
                "type": "string",
                "description": "Inline content to validate instead of a file",
            },
        },
    }


def apply_schema(default_file: str) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "config_path": {
                "type": "string",
                "description": f"Config file, relative to the config directory (default: {default_file})",
            },
            "patch": {
                "type": "string",
                "description": "Patch lines: '+' add, '-' remove, ' ' context",
            },
            "dry_run": {
                "type": "boolean",
                "description": "Preview changes without writing (default: true)",
                "default": True,
            },
            "backup_path": {
                "type": "string",
                "description": "Custom backup location (default: timestamped sibling file)",
            },
        },
        "required": ["patch"],
    }


def make_validate_tool(
    validator: ContentValidator,
    base_dir: Path,
    default_file: str,
) -> ToolHandler:
    def validate(arguments: dict[str, Any]) -> dict[str, Any]:
        content = optional_str(arguments, "content", max_length=MAX_PATCH_SIZE)
        path = optional_str(arguments, "config_path", max_length=MAX_PATH_LENGTH)
        if content is not None and path is not None:
            raise InvalidArgumentError("content", "pass either 'content' or 'config_path', not both")

        source = "<inline>"
        if content is None:
            raw_path = path or default_file
            try:
                target = resolve_within(raw_path, base_dir)
            except PathValidationError as exc:
                raise InvalidArgumentError("config_path", exc.reason) from exc
            try:
                content = target.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                raise ToolError(f"Cannot read {target}: {exc}", data={"path": str(target)}) from exc
            source = str(target)

        report = validator(content)
        return {
            "success": report.success,
            "source": source,
            "errors": report.errors,
            "warnings": report.warnings,
        }

    return validate


def make_apply_tool(pipeline: MutationPipeline, default_file: str) -> ToolHandler:
    def apply(arguments: dict[str, Any]) -> dict[str, Any]:
        path = optional_str(arguments, "config_path", max_length=MAX_PATH_LENGTH) or default_file
        patch = required_str(arguments, "patch", max_length=pipeline.policy.max_patch_size)
        dry_run = optional_bool(arguments, "dry_run", default=True)
        backup_path = optional_str(arguments, "backup_path", max_length=MAX_PATH_LENGTH)

        try:
            outcome = pipeline.run(path, patch, dry_run=dry_run, backup_path=backup_path)
        except MutationPipelineError as exc:
            raise ToolError(str(exc), data={"path": path, "dry_run": dry_run}) from exc

        if not outcome.success:
            raise ToolError(
                "Patch rejected: " + "; ".join(outcome.errors),
                data=outcome.model_dump(mode="json"),
            )
        return outcome.model_dump(mode="json")

    return apply


def make_health_tool(definition: ServerDefinition, timeout: float) -> ToolHandler:
    def health(arguments: dict[str, Any]) -> dict[str, Any]:
        binary_path = find_binary(definition.binary)
        binary_version: str | None = None
        if binary_path is not None:
            result = run_command([binary_path, "--version"], timeout=timeout)
            output = (result.stdout or result.stderr).strip()
            binary_version = output.splitlines()[0] if output else None

        return {
            "status": "healthy" if binary_path else "degraded",
            "server": definition.server_name,
            "version": __version__,
            "binary": definition.binary,
            "binary_found": binary_path is not None,
            "binary_version": binary_version,
        }

    return health
