"""CLI commands for reconciliation reports."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from recon_client.client import ReconClient, create_client, run_and_close
from recon_client.config import get_config
from recon_client.errors import ReconClientError
from recon_client.services.reports import ReportService
from recon_client.utils.errors import handle_error
from recon_client.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="reports", help="List and download reconciliation reports.")


def _build_client(verbose: bool = False) -> tuple[ReconClient, ReportService]:
    client = create_client(get_config(), verbose=verbose)
    return client, ReportService(client)


@app.command("list")
def list_reports(
    status: Annotated[str | None, typer.Option("--status", "-s", help="Filter by status (approved, pending, rejected, draft)")] = None,
    search: Annotated[str | None, typer.Option("--search", help="Match report name, author or reviewer")] = None,
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
) -> None:
    """List generated reports."""
    client, service = _build_client(verbose)
    try:
        reports = run_and_close(client, service.list_reports())
    except ReconClientError as e:
        handle_error(e)
        raise typer.Exit(1)

    rows = [r.to_row() for r in reports]
    if status:
        rows = [r for r in rows if r["status"] == status.lower()]
    if search:
        term = search.lower()
        rows = [
            r for r in rows
            if term in r["name"].lower() or term in r["reportDoneBy"].lower() or term in r["reviewedBy"].lower()
        ]

    console.print(f"[dim]Found {len(rows)} reports[/dim]")
    print_output(rows, output, title="Reports")


@app.command("download")
def download_report(
    report_id: Annotated[int, typer.Argument(help="Report ID")],
    dest: Annotated[str, typer.Option("--dest", "-d", help="Directory to save into")] = ".",
    filename: Annotated[str | None, typer.Option("--filename", "-f", help="Override the file name")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
) -> None:
    """Download a report file."""
    client, service = _build_client(verbose)
    try:
        path = run_and_close(client, service.download_report(report_id, dest, filename))
        console.print(f"[green]Saved report {report_id} to {path}[/green]")
    except ReconClientError as e:
        handle_error(e)
        raise typer.Exit(1)
