"""CLI commands for transaction uploads and reconciliation."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated

import typer
from rich.console import Console

from recon_client.client import ReconClient, create_client, run_and_close
from recon_client.config import get_config
from recon_client.errors import ReconClientError
from recon_client.models.transactions import FileKind, ReconcileRequest
from recon_client.services.transactions import TransactionService
from recon_client.utils.errors import handle_error
from recon_client.utils.output import OutputFormat, print_json, print_output

console = Console(stderr=True)
app = typer.Typer(name="transactions", help="Upload transaction files and reconcile them.")


def _build_client(verbose: bool = False) -> tuple[ReconClient, TransactionService]:
    client = create_client(get_config(), verbose=verbose)
    return client, TransactionService(client)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@app.command("upload")
def upload(
    host: Annotated[str | None, typer.Option("--host", help="Host (FE) transaction file")] = None,
    issuer: Annotated[str | None, typer.Option("--issuer", help="Issuer file")] = None,
    acquirer: Annotated[str | None, typer.Option("--acquirer", help="Acquirer file")] = None,
    ihs: Annotated[str | None, typer.Option("--ihs", help="IHS file")] = None,
    recon_date: Annotated[str | None, typer.Option("--recon-date", help="Reconciliation timestamp (default: now)")] = None,
    output: Annotated[OutputFormat, typer.Option("--output", "-o")] = OutputFormat.JSON,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
) -> None:
    """Upload one or more source files for reconciliation."""
    files = {
        kind: path
        for kind, path in (
            (FileKind.HOST, host),
            (FileKind.ISSUER, issuer),
            (FileKind.ACQUIRER, acquirer),
            (FileKind.IHS, ihs),
        )
        if path
    }
    if not files:
        console.print("[red]Select at least one file to upload.[/red]")
        raise typer.Exit(1)

    recon_date = recon_date or _now_iso()
    client, service = _build_client(verbose)
    try:
        results = run_and_close(client, service.upload_all(files, recon_date))
    except (ReconClientError, FileNotFoundError) as e:
        handle_error(e)
        raise typer.Exit(1)

    console.print(f"[green]Uploaded {len(results)} file(s) for {recon_date}.[/green]")
    rows = [
        {"file": kind.value, "result": result if result else "ok"}
        for kind, result in results.items()
    ]
    print_output(rows, output, title="Uploads")


@app.command("reconcile")
def reconcile(
    user_id: Annotated[int, typer.Option("--user-id", help="ID of the user running the reconciliation")],
    account_number: Annotated[str, typer.Option("--account-number")],
    account_name: Annotated[str, typer.Option("--account-name")],
    recon_date: Annotated[str, typer.Option("--recon-date", help="Reconciliation date")],
    currency: Annotated[str, typer.Option("--currency")] = "USD",
    timestamp: Annotated[str | None, typer.Option("--timestamp", help="Upload timestamp (default: now)")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
) -> None:
    """Reconcile uploaded files and save a report."""
    request = ReconcileRequest(
        user_id=user_id,
        account_number=account_number,
        account_name=account_name,
        recon_date=recon_date,
        currency=currency,
        timestamp=timestamp or _now_iso(),
    )
    client, service = _build_client(verbose)
    try:
        result = run_and_close(client, service.reconcile_and_save_report(request))
        print_json(result or {"status": "success"})
    except ReconClientError as e:
        handle_error(e)
        raise typer.Exit(1)


@app.command("view")
def view(
    recon_date: Annotated[str | None, typer.Option("--recon-date")] = None,
    page: Annotated[int, typer.Option("--page")] = 0,
    size: Annotated[int, typer.Option("--size")] = 20,
    view_type: Annotated[str, typer.Option("--type", "-t", help="matched, exceptions, usOnOthersAfterCutOff, othersOnUsAfterCutOff")] = "matched",
    output: Annotated[OutputFormat, typer.Option("--output", "-o")] = OutputFormat.TABLE,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
) -> None:
    """Show one page of reconciled transactions."""
    client, service = _build_client(verbose)
    try:
        data = run_and_close(client, service.view_reconciled(page, size, recon_date))
    except ReconClientError as e:
        handle_error(e)
        raise typer.Exit(1)

    rows = data.get(view_type, []) if isinstance(data, dict) else []
    print_output(rows, output, title=f"Reconciled: {view_type} (page {page})")
