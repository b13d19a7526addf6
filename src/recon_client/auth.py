"""Session authentication against the recon backend.

Handles login, signup, logout and the raw refresh-endpoint call. Refresh
coordination lives in recon_client.refresh.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import httpx

from recon_client.config import Config
from recon_client.credentials import CredentialStore, token_status, write_private_json
from recon_client.decoding import decode_body, error_detail, raise_for_error
from recon_client.errors import AuthExpired, DecodeError, NetworkFailure, ReconClientError
from recon_client.models.auth import LoginResponse, TokenResponse, TokenStatus

logger = logging.getLogger(__name__)


class AuthManager:
    """Manages the session for the recon backend.

    The refresh credential is an HTTP-only cookie set by the login response;
    it lives in the cookie jar of the shared ``httpx.AsyncClient``. When
    ``session_file`` is given the jar is persisted there between processes.
    """

    def __init__(
        self,
        config: Config,
        credentials: CredentialStore,
        http: httpx.AsyncClient | None = None,
        session_file: Path | None = None,
    ) -> None:
        self._config = config
        self._credentials = credentials
        self._http = http or httpx.AsyncClient(timeout=config.settings.request_timeout)
        self._session_file = session_file
        self._load_session()

    @property
    def credentials(self) -> CredentialStore:
        return self._credentials

    @property
    def http(self) -> httpx.AsyncClient:
        return self._http

    async def login(self, username: str, password: str) -> LoginResponse:
        """Log in and store the issued access token."""
        response = await self._post(
            self._config.endpoints.login,
            json={"username": username, "password": password},
        )
        raise_for_error(response)

        try:
            login_data = LoginResponse.model_validate(response.json())
        except ValueError as e:
            raise DecodeError(f"Login returned a malformed body: {e}") from e

        self._credentials.set(
            login_data.token, login_data.expires_in or self._config.settings.token_ttl
        )
        self._save_session()
        return login_data

    async def signup(self, username: str, email: str, password: str) -> Any:
        """Register a new account. Does not log in."""
        response = await self._post(
            self._config.endpoints.signup,
            json={"username": username, "email": email, "password": password},
        )
        raise_for_error(response)
        return decode_body(response)

    async def logout(self) -> None:
        """End the session on the server and always drop the local token."""
        token = self._credentials.get()
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        try:
            response = await self._post(self._config.endpoints.logout, headers=headers)
            raise_for_error(response)
        except ReconClientError as e:
            logger.warning(f"Server-side logout failed, clearing local session anyway: {e}")
        finally:
            self._credentials.clear()
            self._http.cookies.clear()
            if self._session_file:
                self._session_file.unlink(missing_ok=True)

    async def refresh_access_token(self) -> TokenResponse:
        """Call the refresh endpoint once.

        Raises:
            AuthExpired: The backend refused to refresh or answered with a
                body that carries no access token.
            NetworkFailure: The refresh request never got a response.
        """
        response = await self._post(self._config.endpoints.refresh)

        if not response.is_success:
            raise AuthExpired(
                f"Token refresh failed (HTTP {response.status_code}): {error_detail(response)}"
            )

        try:
            token_data = TokenResponse.model_validate(response.json())
        except ValueError as e:
            raise AuthExpired(f"Token refresh returned a malformed body: {e}") from e

        # The refresh cookie may have been rotated
        self._save_session()
        return token_data

    def get_status(self) -> TokenStatus:
        """Get the current token status."""
        return token_status(self._credentials)

    def _load_session(self) -> None:
        if not self._session_file or not self._session_file.exists():
            return
        try:
            with open(self._session_file) as f:
                self._http.cookies.update(json.load(f))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable session file {self._session_file}: {e}")

    def _save_session(self) -> None:
        if not self._session_file:
            return
        self._session_file.parent.mkdir(parents=True, exist_ok=True)
        cookies = {cookie.name: cookie.value for cookie in self._http.cookies.jar}
        write_private_json(self._session_file, cookies)

    async def _post(self, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._http.post(self._config.url(path), **kwargs)
        except httpx.HTTPError as e:
            raise NetworkFailure(f"POST {path} failed: {e}") from e

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()
