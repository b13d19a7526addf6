"""Auth-related data models."""

from __future__ import annotations

from datetime import datetime
from pydantic import BaseModel, Field


class TokenResponse(BaseModel):
    """Response from the token refresh endpoint."""
    access_token: str = Field(min_length=1)
    token_type: str = "bearer"
    expires_in: int | None = None


class LoginResponse(BaseModel):
    """Response from the login endpoint."""
    token: str = Field(min_length=1)
    message: str = ""
    expires_in: int | None = None


class TokenStatus(BaseModel):
    """Current state of the stored access token.

    ``is_expired`` reflects the storage hint only; the server decides.
    """
    has_token: bool
    is_expired: bool
    expires_at: datetime | None = None
    seconds_remaining: int | None = None
