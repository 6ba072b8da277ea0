"""Line transports for the protocol engine.

Each transport satisfies the :class:`LineTransport` protocol, providing
``read_line`` and ``write_line``.  The engine never touches stdin/stdout
directly, so tests can drive it with in-memory streams.
"""

from __future__ import annotations

import sys
from typing import Protocol, TextIO, runtime_checkable


class TransportClosedError(RuntimeError):
    """The output side of the transport can no longer be written."""


@runtime_checkable
class LineTransport(Protocol):
    """Abstract newline-delimited transport."""

    def read_line(self) -> str | None: ...
    def write_line(self, line: str) -> None: ...


class StdioTransport:
    """Reads requests from one text stream and writes responses to another.

    Defaults to the process stdin/stdout.  Nothing but protocol lines may be
    written to the output stream.
    """

    def __init__(self, reader: TextIO | None = None, writer: TextIO | None = None) -> None:
        self._reader = reader if reader is not None else sys.stdin
        self._writer = writer if writer is not None else sys.stdout

    def read_line(self) -> str | None:
        """Return the next line, or ``None`` at end of stream."""
        line = self._reader.readline()
        if line == "":
            return None
        return line

    def write_line(self, line: str) -> None:
        """Write one line and flush it."""
        try:
            self._writer.write(line + "\n")
            self._writer.flush()
        except (OSError, ValueError) as exc:
            msg = f"Transport closed: {exc}"
            raise TransportClosedError(msg) from exc
