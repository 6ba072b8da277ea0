"""Domain servers.  Each differs from the others only in its registry contents."""

from dotmcp.servers.base import ServerDefinition
from dotmcp.servers.kitty import KITTY
from dotmcp.servers.wofi import WOFI

SERVERS: dict[str, ServerDefinition] = {
    WOFI.name: WOFI,
    KITTY.name: KITTY,
}


def get_server(name: str) -> ServerDefinition:
    """Return the server named *name*.

    Raises:
        KeyError: No such server.
    """
    try:
        return SERVERS[name]
    except KeyError:
        msg = f"Unknown server: {name}. Available: {', '.join(sorted(SERVERS))}"
        raise KeyError(msg) from None


__all__ = ["KITTY", "SERVERS", "WOFI", "ServerDefinition", "get_server"]
