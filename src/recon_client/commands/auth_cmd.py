"""CLI commands for session management."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from recon_client.client import ReconClient, create_client, run_and_close
from recon_client.config import get_config
from recon_client.credentials import FileCredentialStore, token_status as credential_status
from recon_client.errors import AuthExpired, ReconClientError
from recon_client.utils.errors import handle_error
from recon_client.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="auth", help="Log in, log out and inspect the session.")


def _build_client(verbose: bool = False) -> ReconClient:
    return create_client(get_config(), verbose=verbose)


def _status_row(client: ReconClient, status_label: str) -> dict[str, object]:
    token_status = client.auth.get_status()
    return {
        "status": status_label,
        "has_token": token_status.has_token,
        "expires_at": str(token_status.expires_at) if token_status.expires_at else "N/A",
        "seconds_remaining": token_status.seconds_remaining or 0,
    }


@app.command()
def login(
    username: Annotated[str, typer.Option("--username", "-u", prompt=True, help="Account username")],
    password: Annotated[str, typer.Option("--password", "-p", prompt=True, hide_input=True, help="Account password")],
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
) -> None:
    """Log in and store the access token."""
    client = _build_client(verbose)
    try:
        console.print(f"Logging in as [bold]{username}[/bold]...", style="yellow")
        result = run_and_close(client, client.auth.login(username, password))
        row = _status_row(client, "authenticated")
        if result.message:
            row["message"] = result.message
        print_output(row, output, title="Authentication")
    except ReconClientError as e:
        handle_error(e)
        raise typer.Exit(1)


@app.command()
def signup(
    username: Annotated[str, typer.Option("--username", "-u", prompt=True)],
    email: Annotated[str, typer.Option("--email", "-e", prompt=True)],
    password: Annotated[str, typer.Option("--password", "-p", prompt=True, hide_input=True, confirmation_prompt=True)],
    output: Annotated[OutputFormat, typer.Option("--output", "-o")] = OutputFormat.TABLE,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
) -> None:
    """Register a new account."""
    client = _build_client(verbose)
    try:
        result = run_and_close(client, client.auth.signup(username, email, password))
        print_output(result or {"status": "registered", "username": username}, output, title="Signup")
    except ReconClientError as e:
        handle_error(e)
        raise typer.Exit(1)


@app.command()
def logout(
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
) -> None:
    """End the session and forget the stored token."""
    client = _build_client(verbose)
    run_and_close(client, client.auth.logout())
    console.print("[green]Logged out.[/green]")


@app.command()
def status(
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Show the stored token status. Does not contact the server."""
    token_status = credential_status(FileCredentialStore(get_config().settings.state_dir))
    result = {
        "has_token": token_status.has_token,
        "is_expired": token_status.is_expired,
        "expires_at": str(token_status.expires_at) if token_status.expires_at else "N/A",
        "seconds_remaining": token_status.seconds_remaining or 0,
    }
    print_output(result, output, title="Token Status")


@app.command()
def refresh(
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
) -> None:
    """Force a token refresh using the stored session."""
    client = _build_client(verbose)
    try:
        console.print("Refreshing access token...", style="yellow")
        stale = client.auth.credentials.get()
        outcome = run_and_close(client, client.coordinator.ensure_fresh_token(stale_token=stale))
        if not outcome.ok:
            raise outcome.error or AuthExpired()
        print_output(_status_row(client, "refreshed"), output, title="Token Refreshed")
    except ReconClientError as e:
        handle_error(e)
        raise typer.Exit(1)
