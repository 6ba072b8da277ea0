"""CLI subcommand registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all subcommands on the CLI group."""
    from dotmcp.cli_commands.serve import serve
    from dotmcp.cli_commands.tools import tools
    from dotmcp.cli_commands.validate import validate

    cli.add_command(serve)
    cli.add_command(tools)
    cli.add_command(validate)
