"""Single-flight access token refresh.

At most one refresh call is outstanding per coordinator. Requests that hit a
401 while a refresh is running are parked as PendingRequest waiters and all
receive the outcome of that one refresh, in the order they were parked.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx

from recon_client.credentials import CredentialStore
from recon_client.errors import NetworkFailure, ReconClientError
from recon_client.models.auth import TokenResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RefreshOutcome:
    """Result of a refresh: either a new token or the error that ended the session."""
    token: str | None = None
    error: ReconClientError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.token is not None


@dataclass
class PendingRequest:
    """A request parked until the in-flight refresh settles."""
    request: httpx.Request | None
    future: asyncio.Future[RefreshOutcome]


class RefreshCoordinator:
    """Owns the refresh-in-progress flag and the waiter queue."""

    def __init__(
        self,
        refresh: Callable[[], Awaitable[TokenResponse]],
        credentials: CredentialStore,
        timeout: float = 10.0,
        default_ttl: int = 900,
    ) -> None:
        self._refresh = refresh
        self._credentials = credentials
        self._timeout = timeout
        self._default_ttl = default_ttl
        self._in_progress = False
        self._queue: deque[PendingRequest] = deque()
        self._leader: asyncio.Future[RefreshOutcome] | None = None
        self._flight: asyncio.Task[RefreshOutcome] | None = None

    @property
    def in_progress(self) -> bool:
        return self._in_progress

    @property
    def pending(self) -> int:
        """Number of requests parked behind the current refresh."""
        return len(self._queue)

    async def ensure_fresh_token(
        self,
        request: httpx.Request | None = None,
        stale_token: str | None = None,
    ) -> RefreshOutcome:
        """Obtain a token newer than ``stale_token``.

        Args:
            request: The request that was rejected, kept for logging and replay.
            stale_token: The token that request carried (None if it had none).

        Returns:
            The RefreshOutcome shared by every caller of the same refresh.

        The refresh itself runs in a task owned by the coordinator, so
        cancelling the caller that started it only stops that caller waiting.
        """
        if self._in_progress:
            return await self._wait(request)

        # A refresh completed after this caller's request went out.
        current = self._credentials.get()
        if current is not None and current != stale_token:
            return RefreshOutcome(token=current)

        self._in_progress = True
        self._leader = asyncio.get_running_loop().create_future()
        leader = self._leader
        self._flight = asyncio.ensure_future(self._fly())
        return await leader

    async def _fly(self) -> RefreshOutcome:
        outcome = RefreshOutcome(error=NetworkFailure("Token refresh was interrupted"))
        try:
            outcome = await self._run_refresh()
        finally:
            self._in_progress = False
            self._flight = None
            if not outcome.ok:
                self._credentials.clear()
            self._release(outcome)
        return outcome

    async def _wait(self, request: httpx.Request | None) -> RefreshOutcome:
        future: asyncio.Future[RefreshOutcome] = asyncio.get_running_loop().create_future()
        self._queue.append(PendingRequest(request=request, future=future))
        if request is not None:
            logger.info(f"{request.method} {request.url} waiting for in-flight token refresh")
        return await future

    async def _run_refresh(self) -> RefreshOutcome:
        logger.info("Refreshing access token")
        try:
            token_data = await asyncio.wait_for(self._refresh(), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Token refresh timed out after {self._timeout:.1f}s")
            return RefreshOutcome(
                error=NetworkFailure(f"Token refresh timed out after {self._timeout:.1f}s")
            )
        except ReconClientError as e:
            logger.warning(f"Token refresh failed: {e}")
            return RefreshOutcome(error=e)

        self._credentials.set(token_data.access_token, token_data.expires_in or self._default_ttl)
        return RefreshOutcome(token=token_data.access_token)

    def _release(self, outcome: RefreshOutcome) -> None:
        """Settle the leader, then every parked waiter in enqueue order."""
        leader, self._leader = self._leader, None
        waiters, self._queue = self._queue, deque()
        if waiters:
            state = "succeeded" if outcome.ok else "failed"
            logger.info(f"Token refresh {state}; releasing {len(waiters)} queued request(s)")
        if leader is not None and not leader.done():
            leader.set_result(outcome)
        for waiter in waiters:
            if not waiter.future.done():
                waiter.future.set_result(outcome)
