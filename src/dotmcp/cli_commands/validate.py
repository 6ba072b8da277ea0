"""``dotmcp validate``: check a config file without starting a server."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from dotmcp.cli_commands._output import console, print_validation
from dotmcp.servers import SERVERS, get_server


@click.command()
@click.argument("server", type=click.Choice(sorted(SERVERS)))
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def validate(server: str, path: Path) -> None:
    """Validate the config file at PATH with SERVER's rules."""
    definition = get_server(server)

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        console.print(f"[red]Cannot read {path}:[/red] {exc}", highlight=False)
        sys.exit(1)

    report = definition.validator(content)
    print_validation(str(path), report)
    if not report.success:
        sys.exit(1)
