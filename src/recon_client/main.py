"""Recon CLI — entry point.

Agent-friendly CLI for the reconciliation dashboard backend.
"""

from __future__ import annotations

import logging

import typer

from recon_client.commands.auth_cmd import app as auth_app
from recon_client.commands.users_cmd import app as users_app
from recon_client.commands.reports_cmd import app as reports_app
from recon_client.commands.transactions_cmd import app as transactions_app

app = typer.Typer(
    name="recon",
    help="CLI for the reconciliation dashboard backend.",
    no_args_is_help=True,
)

# Register command groups
app.add_typer(auth_app, name="auth")
app.add_typer(users_app, name="users")
app.add_typer(reports_app, name="reports")
app.add_typer(transactions_app, name="transactions")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Recon CLI — sessions, users, reports and transaction uploads."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


if __name__ == "__main__":
    app()
