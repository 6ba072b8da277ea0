"""Shared CLI output formatters."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from dotmcp.mutation.models import ValidationReport
    from dotmcp.protocol.models import ToolDescriptor

console = Console()


def print_tools_table(title: str, descriptors: list[ToolDescriptor], *, as_json: bool = False) -> None:
    """Pretty-print tool descriptors as a table (or JSON)."""
    if as_json:
        console.print_json(json.dumps([d.to_wire() for d in descriptors]))
        return

    table = Table(title=title)
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Description")
    table.add_column("Required")

    for descriptor in descriptors:
        required = descriptor.input_schema.get("required", [])
        table.add_row(
            descriptor.name,
            _truncate(descriptor.description),
            ", ".join(required) or "-",
        )

    console.print(table)


def print_validation(source: str, report: ValidationReport) -> None:
    """Print errors and warnings from a validation run."""
    if report.success:
        console.print(f"[green]{escape(source)}: valid[/green]")
    else:
        console.print(f"[red]{escape(source)}: {len(report.errors)} error(s)[/red]")
    for error in report.errors:
        console.print(f"  [red]error[/red]   {escape(error)}", highlight=False)
    for warning in report.warnings:
        console.print(f"  [yellow]warning[/yellow] {escape(warning)}", highlight=False)


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
