"""Access token storage.

The store only holds the token the client currently believes is valid.
The ttl passed to ``set`` is a storage cleanup hint, like a cookie max-age;
the client never uses it to predict a 401.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timedelta
from pathlib import Path
from typing import Protocol

from recon_client.models.auth import TokenStatus

logger = logging.getLogger(__name__)


class CredentialStore(Protocol):
    def get(self) -> str | None: ...

    def set(self, token: str, ttl: int) -> None: ...

    def clear(self) -> None: ...

    def expires_at(self) -> datetime | None: ...


def write_private_json(path: Path, data: object) -> None:
    """Write JSON to ``path`` with owner-only permissions from the moment it exists."""
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w") as f:
        # O_CREAT's mode does not apply to a file that already existed
        path.chmod(0o600)
        json.dump(data, f)


def token_status(store: CredentialStore) -> TokenStatus:
    """Summarize a store's token for display."""
    if store.get() is None:
        return TokenStatus(has_token=False, is_expired=True)

    expiry = store.expires_at()
    now = datetime.now()
    is_expired = expiry is not None and now > expiry
    seconds_remaining = None
    if expiry and not is_expired:
        seconds_remaining = int((expiry - now).total_seconds())

    return TokenStatus(
        has_token=True,
        is_expired=is_expired,
        expires_at=expiry,
        seconds_remaining=seconds_remaining,
    )


class MemoryCredentialStore:
    """In-process token storage."""

    def __init__(self) -> None:
        self._token: str | None = None
        self._expiry: datetime | None = None

    def get(self) -> str | None:
        if self._token and self._expiry and datetime.now() > self._expiry:
            self.clear()
        return self._token

    def set(self, token: str, ttl: int) -> None:
        self._token = token
        self._expiry = datetime.now() + timedelta(seconds=ttl)

    def clear(self) -> None:
        self._token = None
        self._expiry = None

    def expires_at(self) -> datetime | None:
        return self._expiry


class FileCredentialStore:
    """Token storage persisted as JSON at ``{state_dir}/credentials.json``.

    Lets separate CLI invocations share the token obtained by ``auth login``.
    """

    def __init__(self, state_dir: str = "./.recon") -> None:
        self._dir = Path(state_dir)
        self._file = self._dir / "credentials.json"

    def _load(self) -> dict[str, str] | None:
        if not self._file.exists():
            return None
        try:
            with open(self._file) as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable credentials file {self._file}: {e}")
            return None
        if not isinstance(data, dict) or not data.get("access_token"):
            return None
        return data

    def get(self) -> str | None:
        data = self._load()
        if data is None:
            return None
        expiry = self.expires_at()
        if expiry and datetime.now() > expiry:
            self.clear()
            return None
        return data["access_token"]

    def set(self, token: str, ttl: int) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)
        expiry = datetime.now() + timedelta(seconds=ttl)
        write_private_json(self._file, {"access_token": token, "expires_at": expiry.isoformat()})

    def clear(self) -> None:
        self._file.unlink(missing_ok=True)

    def expires_at(self) -> datetime | None:
        data = self._load()
        if not data or not data.get("expires_at"):
            return None
        try:
            return datetime.fromisoformat(data["expires_at"])
        except ValueError:
            return None
