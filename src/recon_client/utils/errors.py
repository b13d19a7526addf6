"""Structured error handling for agent-friendly output."""

from __future__ import annotations

import json
import sys

from rich.console import Console

from recon_client.errors import AuthExpired, DecodeError, NetworkFailure, ServerError

console = Console(stderr=True)

_LOGIN_HINT = "Session expired — run `recon auth login`"

# Actionable hints keyed by error substring
_ERROR_HINTS: list[tuple[str, str]] = [
    ("session expired", _LOGIN_HINT),
    ("unauthorized", _LOGIN_HINT),
    ("403", "Your role does not allow this action"),
    ("404", "The specified resource does not exist — verify the ID"),
    ("413", "Upload too large — split the file or ask for a higher limit"),
    ("timed out", "Request timed out — try again or check network connectivity"),
    ("connect", "Connection error — check RECON_API_BASE_URL and network connectivity"),
    ("invalid json", "The backend returned a malformed response — report this as a bug"),
    ("token refresh", _LOGIN_HINT),
]


def _get_hint(error_message: str) -> str | None:
    """Match an error message to an actionable hint."""
    lower = error_message.lower()
    for pattern, hint in _ERROR_HINTS:
        if pattern.lower() in lower:
            return hint
    return None


def _error_code(error: Exception) -> str:
    if isinstance(error, AuthExpired):
        return "AUTH_EXPIRED"
    if isinstance(error, NetworkFailure):
        return "NETWORK_FAILURE"
    if isinstance(error, ServerError):
        return "SERVER_ERROR"
    if isinstance(error, DecodeError):
        return "DECODE_ERROR"
    return "RUNTIME_ERROR"


def handle_error(error: Exception) -> None:
    """Handle an error with structured output to stdout and human-readable output to stderr.

    Outputs a JSON error object to stdout for agent consumption:
    {"error": true, "code": "AUTH_EXPIRED", "message": "...", "hint": "..."}

    Also prints a human-readable error to stderr.
    """
    message = str(error)
    hint = _LOGIN_HINT if isinstance(error, AuthExpired) else _get_hint(message)

    error_obj: dict[str, object] = {
        "error": True,
        "code": _error_code(error),
        "message": message,
    }
    if isinstance(error, ServerError):
        error_obj["status"] = error.status
    if hint:
        error_obj["hint"] = hint

    json.dump(error_obj, sys.stdout)
    sys.stdout.write("\n")

    # Human-readable to stderr
    console.print(f"[red]Error:[/red] {message}")
    if hint:
        console.print(f"[dim]Hint: {hint}[/dim]")
