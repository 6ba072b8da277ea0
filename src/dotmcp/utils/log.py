"""Logging setup for server processes.

Stdout is the protocol channel, so every handler installed here writes to
stderr.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

stderr_console = Console(stderr=True)


def configure_logging(level: str = "INFO") -> None:
    """Route the root logger to a rich handler on stderr."""
    handler = RichHandler(
        console=stderr_console,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level.upper())
