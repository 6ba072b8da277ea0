"""``dotmcp tools``: inspect the tools a server exposes."""

from __future__ import annotations

import click

from dotmcp.cli_commands._output import print_tools_table
from dotmcp.servers import SERVERS, get_server


@click.group()
def tools() -> None:
    """Inspect server tools."""


@tools.command("list")
@click.argument("server", type=click.Choice(sorted(SERVERS)))
@click.option("--json", "as_json", is_flag=True, help="Print descriptors as JSON.")
def list_tools(server: str, as_json: bool) -> None:
    """List the tools SERVER registers, in registration order."""
    from dotmcp.config import ServerSettings

    definition = get_server(server)
    registry = definition.build_registry(ServerSettings())
    print_tools_table(f"{definition.server_name} tools", registry.list(), as_json=as_json)
