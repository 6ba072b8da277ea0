"""Bounded calls to external binaries."""

from __future__ import annotations

import logging
import shutil
import subprocess

from pydantic import BaseModel

from dotmcp.tools.errors import CommandTimeoutError, ToolError

logger = logging.getLogger(__name__)


class CommandResult(BaseModel):
    """Captured output of a finished command."""

    exit_code: int
    stdout: str = ""
    stderr: str = ""


def find_binary(name: str) -> str | None:
    return shutil.which(name)


def run_command(command: list[str], *, timeout: float) -> CommandResult:
    """Run *command* without a shell and wait at most *timeout* seconds.

    Raises:
        CommandTimeoutError: The command did not finish in time (it is killed).
        ToolError: The binary could not be started.
    """
    logger.debug("Running %s (timeout %ss)", command, timeout)
    try:
        proc = subprocess.run(
            command,
            capture_output=True,
            text=True,
            errors="replace",
            stdin=subprocess.DEVNULL,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        raise CommandTimeoutError(" ".join(command), timeout) from exc
    except OSError as exc:
        raise ToolError(f"Cannot run {command[0]}: {exc}", data={"command": command}) from exc

    return CommandResult(
        exit_code=proc.returncode,
        stdout=proc.stdout or "",
        stderr=proc.stderr or "",
    )
