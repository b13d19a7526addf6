"""Output formatting utilities for agent-friendly CLI output."""

from __future__ import annotations

import csv
import json
import sys
from enum import Enum
from typing import Any

from pydantic import BaseModel
from rich.console import Console
from rich.table import Table

from recon_client.decoding import NO_CONTENT

console = Console(stderr=True)


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"
    CSV = "csv"


def to_rows(data: Any) -> list[dict[str, Any]]:
    """Normalize API results (models, dicts, lists, NO_CONTENT) into table rows."""
    if data is NO_CONTENT or data is None:
        return []
    if isinstance(data, (BaseModel, dict)):
        data = [data]

    rows = []
    for item in data:
        if isinstance(item, BaseModel):
            rows.append(item.model_dump(by_alias=True, mode="json"))
        elif isinstance(item, dict):
            rows.append(item)
        else:
            rows.append({"value": item})
    return rows


def print_output(
    data: Any,
    fmt: OutputFormat = OutputFormat.TABLE,
    columns: list[str] | None = None,
    title: str | None = None,
) -> None:
    """Print data in the requested format.

    Args:
        data: The data to display (models, dicts, or lists of either).
        fmt: Output format (table, json, csv).
        columns: Which columns to show in table/csv mode. None = all.
        title: Optional title for table output.
    """
    rows = to_rows(data)
    if fmt == OutputFormat.JSON:
        print_json(rows if isinstance(data, list) else (rows[0] if rows else None))
    elif fmt == OutputFormat.CSV:
        print_csv(rows, columns)
    else:
        print_table(rows, columns, title)


def print_json(data: Any) -> None:
    """Print data as formatted JSON to stdout."""
    json.dump(data, sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")


def print_table(
    rows: list[dict[str, Any]],
    columns: list[str] | None = None,
    title: str | None = None,
) -> None:
    """Print rows as a Rich table."""
    if not rows:
        console.print("[dim]No results.[/dim]")
        return

    # Auto-detect columns from first row if not specified
    if columns is None:
        columns = list(rows[0].keys())

    table = Table(title=title, show_lines=False)
    for col in columns:
        table.add_column(col, overflow="fold")

    for row in rows:
        table.add_row(*[str(row.get(col, "")) for col in columns])

    console.print(table)


def print_csv(rows: list[dict[str, Any]], columns: list[str] | None = None) -> None:
    """Print rows as CSV to stdout."""
    if not rows:
        return

    if columns is None:
        columns = list(rows[0].keys())

    writer = csv.DictWriter(sys.stdout, fieldnames=columns, extrasaction="ignore", lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow({k: row.get(k, "") for k in columns})
