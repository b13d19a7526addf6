"""CLI commands for user management."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from recon_client.client import ReconClient, create_client, run_and_close
from recon_client.config import get_config
from recon_client.errors import ReconClientError
from recon_client.models.users import UserCreate, UserUpdate
from recon_client.services.users import UserService
from recon_client.utils.errors import handle_error
from recon_client.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="users", help="Manage dashboard users and roles.")

USER_COLUMNS = ["id", "username", "email", "roleName"]


def _build_client(verbose: bool = False) -> tuple[ReconClient, UserService]:
    client = create_client(get_config(), verbose=verbose)
    return client, UserService(client)


@app.command("list")
def list_users(
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
) -> None:
    """List all users."""
    client, service = _build_client(verbose)
    try:
        users = run_and_close(client, service.list_users())
        console.print(f"[dim]Found {len(users)} users[/dim]")
        print_output(users, output, columns=USER_COLUMNS, title="Users")
    except ReconClientError as e:
        handle_error(e)
        raise typer.Exit(1)


@app.command("roles")
def list_roles(
    output: Annotated[OutputFormat, typer.Option("--output", "-o")] = OutputFormat.TABLE,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
) -> None:
    """List assignable roles."""
    client, service = _build_client(verbose)
    try:
        roles = run_and_close(client, service.list_roles())
        print_output(roles, output, columns=["id", "roleName"], title="Roles")
    except ReconClientError as e:
        handle_error(e)
        raise typer.Exit(1)


@app.command("create")
def create_user(
    username: Annotated[str, typer.Option("--username", "-u", help="Login name")],
    email: Annotated[str, typer.Option("--email", "-e", help="Email address")],
    role: Annotated[str, typer.Option("--role", "-r", help="Role name (see `users roles`)")],
    password: Annotated[str, typer.Option("--password", "-p", prompt=True, hide_input=True, confirmation_prompt=True)],
    output: Annotated[OutputFormat, typer.Option("--output", "-o")] = OutputFormat.TABLE,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
) -> None:
    """Create a new user."""
    client, service = _build_client(verbose)
    new_user = UserCreate(username=username, email=email, password=password, role_name=role)
    try:
        result = run_and_close(client, service.create_user(new_user))
        console.print(f"[green]Created user {username}.[/green]")
        if result:
            print_output(result, output, title="Created User")
    except ReconClientError as e:
        handle_error(e)
        raise typer.Exit(1)


@app.command("update")
def update_user(
    user_id: Annotated[int, typer.Argument(help="User ID")],
    username: Annotated[str | None, typer.Option("--username", "-u")] = None,
    email: Annotated[str | None, typer.Option("--email", "-e")] = None,
    role: Annotated[str | None, typer.Option("--role", "-r")] = None,
    password: Annotated[str | None, typer.Option("--password", "-p", help="New password")] = None,
    current_password: Annotated[str | None, typer.Option("--current-password", help="Required with --password")] = None,
    output: Annotated[OutputFormat, typer.Option("--output", "-o")] = OutputFormat.TABLE,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
) -> None:
    """Update a user's details."""
    update = UserUpdate(
        username=username,
        email=email,
        role_name=role,
        password=password,
        current_password=current_password,
    )
    client, service = _build_client(verbose)
    try:
        result = run_and_close(client, service.update_user(user_id, update))
        console.print(f"[green]Updated user {user_id}.[/green]")
        if result:
            print_output(result, output, title="Updated User")
    except (ReconClientError, ValueError) as e:
        handle_error(e)
        raise typer.Exit(1)


@app.command("delete")
def delete_user(
    user_id: Annotated[int, typer.Argument(help="User ID")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
) -> None:
    """Delete a user."""
    if not yes:
        typer.confirm(f"Delete user {user_id}?", abort=True)

    client, service = _build_client(verbose)
    try:
        run_and_close(client, service.delete_user(user_id))
        console.print(f"[green]Deleted user {user_id}.[/green]")
    except ReconClientError as e:
        handle_error(e)
        raise typer.Exit(1)
