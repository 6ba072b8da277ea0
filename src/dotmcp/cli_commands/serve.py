"""``dotmcp serve``: run a domain server over stdin/stdout."""

from __future__ import annotations

import io
import logging
import sys
from pathlib import Path

import click

from dotmcp.servers import SERVERS, get_server

_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

logger = logging.getLogger(__name__)


@click.command()
@click.argument("server", type=click.Choice(sorted(SERVERS)))
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML settings file.",
)
@click.option(
    "--base-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory config paths are resolved against.",
)
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Log level (logs go to stderr).",
)
@click.option("--telemetry", is_flag=True, help="Export tracing spans to stderr.")
def serve(
    server: str,
    config_path: Path | None,
    base_dir: Path | None,
    log_level: str | None,
    telemetry: bool,
) -> None:
    """Serve SERVER's tools over JSON-RPC on stdin/stdout."""
    from dotmcp.config import ConfigError, load_settings
    from dotmcp.protocol.transport import StdioTransport
    from dotmcp.utils.log import configure_logging, stderr_console
    from dotmcp.utils.telemetry import configure_telemetry

    definition = get_server(server)

    try:
        settings = load_settings(
            config_path,
            base_dir=base_dir,
            log_level=log_level,
            telemetry=True if telemetry else None,
        )
    except ConfigError as exc:
        stderr_console.print(f"[red]Configuration error:[/red] {exc}", highlight=False)
        sys.exit(2)

    configure_logging(settings.log_level)

    if settings.telemetry:
        try:
            configure_telemetry(service_name=definition.server_name)
        except ImportError as exc:
            logger.warning("Tracing disabled: %s", exc)

    engine = definition.build_engine(settings)
    logger.info("Config directory: %s", definition.base_dir(settings))

    reader = io.TextIOWrapper(sys.stdin.buffer, encoding="utf-8", errors="replace")
    engine.serve(StdioTransport(reader, sys.stdout))
