"""Server settings and their YAML loader."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from dotmcp.mutation.models import MutationPolicy

LOG_LEVEL_ENV = "DOTMCP_LOG_LEVEL"
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ConfigError(Exception):
    """The settings file could not be read or failed validation."""


class ServerSettings(BaseModel):
    """Settings shared by every domain server."""

    base_dir: Path | None = Field(
        default=None,
        description="Directory config paths are resolved against. Defaults to the domain's XDG directory.",
    )
    backup_required: bool = Field(
        default=False,
        description="Abort an apply when the backup cannot be written.",
    )
    allow_create: bool = Field(
        default=False,
        description="Allow apply to create a config file that does not exist yet.",
    )
    command_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Seconds to wait for external binaries before giving up.",
    )
    log_level: str = Field(default="INFO")
    telemetry: bool = Field(default=False, description="Export tracing spans to stderr.")

    @field_validator("log_level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            msg = f"log_level must be one of {sorted(_LOG_LEVELS)}"
            raise ValueError(msg)
        return level

    def mutation_policy(self) -> MutationPolicy:
        return MutationPolicy(
            backup_required=self.backup_required,
            allow_create=self.allow_create,
        )


def xdg_config_home() -> Path:
    """Return ``$XDG_CONFIG_HOME`` or ``~/.config``."""
    raw = os.environ.get("XDG_CONFIG_HOME")
    return Path(raw) if raw else Path.home() / ".config"


def load_settings(path: Path | None = None, **overrides: Any) -> ServerSettings:
    """Load settings from an optional YAML file, then apply *overrides*.

    Environment variables in the form ``${VAR}`` or ``$VAR`` are expanded
    with :func:`os.path.expandvars` before YAML parsing.  ``DOTMCP_LOG_LEVEL``
    sets the log level unless an override does.  Overrides whose value is
    ``None`` are ignored.

    Raises:
        ConfigError: On unreadable files, YAML errors or schema validation failures.
    """
    data: dict[str, Any] = {}
    if path is not None:
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read {path}: {exc}") from exc

        try:
            loaded: Any = yaml.safe_load(os.path.expandvars(raw))
        except yaml.YAMLError as exc:
            raise ConfigError(f"YAML parse error: {exc}") from exc

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError("Settings YAML must be a mapping")
        data.update(loaded)

    env_level = os.environ.get(LOG_LEVEL_ENV)
    if env_level:
        data["log_level"] = env_level

    data.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return ServerSettings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
