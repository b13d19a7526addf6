"""Authenticated API client for the recon backend.

Handles bearer token injection, one replay after a token refresh, and
response classification.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from pathlib import Path
from typing import Any, TypeVar

import httpx

from recon_client.auth import AuthManager
from recon_client.config import Config, EndpointPaths
from recon_client.credentials import FileCredentialStore
from recon_client.decoding import decode_body, raise_for_error
from recon_client.errors import AuthExpired, NetworkFailure, ReconClientError, ServerError
from recon_client.refresh import RefreshCoordinator

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ReconClient:
    """HTTP client for the recon backend with single-flight token refresh."""

    def __init__(
        self,
        config: Config,
        auth: AuthManager,
        *,
        coordinator: RefreshCoordinator | None = None,
        verbose: bool = False,
    ) -> None:
        self._config = config
        self._auth = auth
        self._credentials = auth.credentials
        self._http = auth.http
        self._verbose = verbose
        self._coordinator = coordinator or RefreshCoordinator(
            auth.refresh_access_token,
            auth.credentials,
            timeout=config.settings.refresh_timeout,
            default_ttl=config.settings.token_ttl,
        )

    @property
    def auth(self) -> AuthManager:
        return self._auth

    @property
    def coordinator(self) -> RefreshCoordinator:
        return self._coordinator

    @property
    def endpoints(self) -> EndpointPaths:
        return self._config.endpoints

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        data: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        content_type: str | None = None,
        accept: str | None = None,
        extra_headers: dict[str, str] | None = None,
    ) -> Any:
        """Make an authenticated API request and decode the result.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE).
            path: API path (e.g. "/api/users"). Appended to the base URL.
            json: JSON request body.
            data: Form fields, sent alongside ``files`` for multipart uploads.
            files: Multipart file fields.
            params: Query parameters.
            content_type: Override Content-Type header. Ignored for multipart.
            accept: Override Accept header.
            extra_headers: Additional headers to include.

        Returns:
            The decoded JSON body, or NO_CONTENT.

        Raises:
            AuthExpired: The session could not be refreshed.
            NetworkFailure: No response was received.
            ServerError: The backend answered with a non-2xx status.
            DecodeError: A JSON response body could not be parsed.
        """
        response = await self.send(
            method,
            path,
            json=json,
            data=data,
            files=files,
            params=params,
            content_type=content_type,
            accept=accept,
            extra_headers=extra_headers,
        )
        return decode_body(response)

    async def send(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        data: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        content_type: str | None = None,
        accept: str | None = None,
        extra_headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Like request(), but return the raw successful response undecoded."""
        url = self._config.url(path)
        headers = self._build_headers(content_type, accept, extra_headers, multipart=bool(files))
        payload = {"json": json, "data": data, "files": files, "params": params}

        token = self._credentials.get()
        request = self._build_request(method, url, headers, token, payload)
        response = await self._transmit(request)

        if response.status_code == 401:
            logger.warning(f"Got 401 for {method} {path}, refreshing token...")
            outcome = await self._coordinator.ensure_fresh_token(request, stale_token=token)
            if not outcome.ok:
                raise _caller_error(outcome.error) from outcome.error

            logger.info(f"Replaying {method} {path} with refreshed token")
            retry = self._build_request(method, url, headers, outcome.token, payload)
            response = await self._transmit(retry)
            if response.status_code == 401:
                self._credentials.clear()
                raise AuthExpired(f"Still unauthorized after token refresh: {method} {path}")

        raise_for_error(response)
        return response

    async def get(self, path: str, **kwargs: Any) -> Any:
        """Convenience method for GET requests."""
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Any:
        """Convenience method for POST requests."""
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> Any:
        """Convenience method for PUT requests."""
        return await self.request("PUT", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Any:
        """Convenience method for DELETE requests."""
        return await self.request("DELETE", path, **kwargs)

    def _build_headers(
        self,
        content_type: str | None = None,
        accept: str | None = None,
        extra_headers: dict[str, str] | None = None,
        multipart: bool = False,
    ) -> dict[str, str]:
        """Build request headers, minus Authorization."""
        headers: dict[str, str] = {}

        # httpx sets the multipart boundary itself
        if content_type and not multipart:
            headers["Content-Type"] = content_type

        if accept:
            headers["Accept"] = accept

        if extra_headers:
            headers.update(extra_headers)

        if multipart:
            headers = {k: v for k, v in headers.items() if k.lower() != "content-type"}

        return headers

    def _build_request(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        token: str | None,
        payload: dict[str, Any],
    ) -> httpx.Request:
        headers = dict(headers)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return self._http.build_request(method, url, headers=headers, **payload)

    async def _transmit(self, request: httpx.Request) -> httpx.Response:
        if self._verbose:
            logger.info(f"{request.method} {request.url}")

        try:
            response = await self._http.send(request)
        except httpx.HTTPError as e:
            raise NetworkFailure(f"{request.method} {request.url} failed: {e}") from e

        if self._verbose:
            logger.info(f"Response: {response.status_code}")
        return response

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._auth.close()

    async def __aenter__(self) -> ReconClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


def _caller_error(error: ReconClientError | None) -> ReconClientError:
    """Copy a refresh error shared by several waiters, one per raising caller."""
    if error is None:
        return AuthExpired()
    if isinstance(error, ServerError):
        return ServerError(error.status, error.message)
    return type(error)(str(error))


def create_client(config: Config, verbose: bool = False) -> ReconClient:
    """Build a client whose token and session cookies persist under the state dir."""
    state_dir = Path(config.settings.state_dir)
    credentials = FileCredentialStore(str(state_dir))
    auth = AuthManager(config, credentials, session_file=state_dir / "session.json")
    return ReconClient(config, auth, verbose=verbose)


def run_and_close(client: ReconClient, call: Awaitable[T]) -> T:
    """Run one client call to completion from synchronous code, then close the client."""

    async def _run() -> T:
        try:
            return await call
        finally:
            await client.close()

    return asyncio.run(_run())
