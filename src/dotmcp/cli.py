"""dotmcp CLI entrypoint."""

from __future__ import annotations

import click

from dotmcp import __version__


@click.group()
@click.version_option(version=__version__, prog_name="dotmcp")
def main() -> None:
    """dotmcp: MCP tool servers for dotfile configuration."""


# Register subcommands
from dotmcp.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
