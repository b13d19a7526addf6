"""Configuration management for the recon client.

Loads settings from .env and endpoint paths from endpoints.yaml.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from dotenv import load_dotenv


class EndpointPaths(BaseModel):
    """Backend paths, relative to the API base URL."""
    login: str = "/api/auth/login"
    signup: str = "/api/auth/signup"
    logout: str = "/api/auth/logout"
    refresh: str = "/api/auth/refresh"
    users: str = "/api/users"
    roles: str = "/api/roles"
    reports: str = "/api/reports"
    transactions: str = "/api/transactions"


class Settings(BaseModel):
    """Application settings loaded from environment variables."""
    base_url: str = Field(default="http://localhost:1977", description="Backend base URL")
    token_ttl: int = Field(default=900, description="Access token lifetime hint in seconds")
    refresh_timeout: float = Field(default=10.0, description="Upper bound on a token refresh call")
    request_timeout: float = Field(default=60.0, description="Per-request HTTP timeout")
    state_dir: str = Field(default="./.recon", description="Directory for the stored access token")


class Config(BaseModel):
    """Full application configuration."""
    settings: Settings
    endpoints: EndpointPaths = EndpointPaths()

    def url(self, path: str) -> str:
        """Join a backend path onto the base URL."""
        if path.startswith(("http://", "https://")):
            return path
        return self.settings.base_url.rstrip("/") + "/" + path.lstrip("/")


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (where config/ lives)."""
    current = Path(__file__).resolve().parent
    for parent in [current, *current.parents]:
        if (parent / "config" / "endpoints.yaml").exists():
            return parent
    # Fallback: cwd
    return Path.cwd()


def _load_endpoints(project_root: Path) -> EndpointPaths:
    """Load endpoint paths from endpoints.yaml, using defaults when absent."""
    endpoints_path = project_root / "config" / "endpoints.yaml"
    if not endpoints_path.exists():
        return EndpointPaths()

    with open(endpoints_path) as f:
        data = yaml.safe_load(f) or {}

    return EndpointPaths(**data.get("endpoints", {}))


def _env(*keys: str, default: str = "") -> str:
    """Try multiple env var names, return the first one found."""
    for key in keys:
        val = os.environ.get(key, "")
        if val:
            return val.strip().strip('"')
    return default


def _load_settings() -> Settings:
    """Load settings from environment variables.

    Supports both RECON_* names and the dashboard's API_BASE_URL.
    """
    return Settings(
        base_url=_env("RECON_API_BASE_URL", "API_BASE_URL", default="http://localhost:1977"),
        token_ttl=int(_env("RECON_TOKEN_TTL", default="900")),
        refresh_timeout=float(_env("RECON_REFRESH_TIMEOUT", default="10")),
        request_timeout=float(_env("RECON_REQUEST_TIMEOUT", default="60")),
        state_dir=_env("RECON_STATE_DIR", default="./.recon"),
    )


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Load and cache the full application configuration."""
    project_root = _find_project_root()

    # Load .env from project root if it exists
    env_path = project_root / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    settings = _load_settings()
    endpoints = _load_endpoints(project_root)

    return Config(settings=settings, endpoints=endpoints)
