"""Shared fixtures for the recon-client test suite."""
from __future__ import annotations

import asyncio
from collections.abc import Callable
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from recon_client.auth import AuthManager
from recon_client.client import ReconClient
from recon_client.config import Config, EndpointPaths, Settings
from recon_client.credentials import MemoryCredentialStore

BASE_URL = "http://recon.test"

Route = Callable[[httpx.Request], httpx.Response]


def json_route(payload, status: int = 200) -> Route:
    """Route that answers every call with a fresh JSON response."""
    return lambda request: httpx.Response(status, json=payload)


class FakeBackend:
    """MockTransport handler standing in for the recon backend.

    Target routes accept only ``Bearer {valid_token}``; anything else gets a
    401. The refresh endpoint hands out ``issued_token`` and can be held open
    with ``refresh_gate`` to let concurrent requests pile up behind it.
    """

    def __init__(
        self,
        valid_token: str = "T2",
        issued_token: str = "T2",
        refresh_status: int = 200,
    ) -> None:
        self.valid_token = valid_token
        self.issued_token = issued_token
        self.refresh_status = refresh_status
        self.refresh_calls = 0
        self.refresh_gate: asyncio.Event | None = None
        self.routes: dict[tuple[str, str], Route] = {}
        self.requests: list[httpx.Request] = []

    def route(self, method: str, path: str, handler: Route) -> None:
        self.routes[(method, path)] = handler

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/auth/refresh":
            self.refresh_calls += 1
            if self.refresh_gate is not None:
                await self.refresh_gate.wait()
            if self.refresh_status != 200:
                return httpx.Response(self.refresh_status, json={"error": "refresh token revoked"})
            return httpx.Response(200, json={"access_token": self.issued_token, "expires_in": 600})

        await request.aread()
        self.requests.append(request)
        if request.headers.get("authorization") != f"Bearer {self.valid_token}":
            return httpx.Response(401, json={"error": "token expired"})

        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"error": "not found"})
        return handler(request)


@pytest.fixture
def fake_settings() -> Settings:
    return Settings(
        base_url=BASE_URL,
        token_ttl=900,
        refresh_timeout=2.0,
        request_timeout=5.0,
        state_dir="./test-state",
    )


@pytest.fixture
def fake_config(fake_settings) -> Config:
    return Config(settings=fake_settings, endpoints=EndpointPaths())


@pytest.fixture
def credentials() -> MemoryCredentialStore:
    return MemoryCredentialStore()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def build_client(fake_config, credentials):
    """Factory for a ReconClient wired to a MockTransport handler."""

    def _build(handler, **kwargs) -> ReconClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        auth = AuthManager(fake_config, credentials, http=http)
        return ReconClient(fake_config, auth, **kwargs)

    return _build


@pytest.fixture
def mock_client():
    """MagicMock standing in for ReconClient."""
    client = MagicMock()
    client.endpoints = EndpointPaths()
    client.get = AsyncMock()
    client.post = AsyncMock()
    client.put = AsyncMock()
    client.delete = AsyncMock()
    client.send = AsyncMock()
    client.close = AsyncMock()
    return client
