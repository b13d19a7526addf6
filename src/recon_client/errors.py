"""Exception taxonomy raised by the recon API client."""

from __future__ import annotations


class ReconClientError(RuntimeError):
    """Base class for every error surfaced by the client."""


class AuthExpired(ReconClientError):
    """The session can no longer be refreshed; the user must log in again."""

    def __init__(self, message: str = "Session expired — please log in again") -> None:
        super().__init__(message)


class NetworkFailure(ReconClientError):
    """Transport-level failure before a response was received."""


class ServerError(ReconClientError):
    """Any non-2xx response other than an authentication failure."""

    def __init__(self, status: int, message: str) -> None:
        self.status = status
        self.message = message
        super().__init__(f"API error (HTTP {status}): {message}")


class DecodeError(ReconClientError):
    """A response declared JSON but its body could not be parsed."""
