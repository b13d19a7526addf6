"""Response classification and body decoding."""

from __future__ import annotations

import json
from typing import Any

import httpx

from recon_client.errors import DecodeError, ServerError


class _NoContent:
    """Sentinel for successful responses that carry no JSON payload."""

    _instance: _NoContent | None = None

    def __new__(cls) -> _NoContent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_CONTENT"


NO_CONTENT = _NoContent()


def is_json_content_type(content_type: str | None) -> bool:
    """True for ``application/json`` and vendor ``+json`` media types."""
    if not content_type:
        return False
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


def error_detail(response: httpx.Response) -> str:
    """Extract a human-readable error detail from a failed response.

    Prefers the ``error`` then ``message`` field of a JSON object body and
    falls back to the raw text.
    """
    text = response.text
    try:
        payload = json.loads(text) if text else None
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        for key in ("error", "message"):
            value = payload.get(key)
            if value:
                return str(value)

    return text.strip() or response.reason_phrase or "no response body"


def raise_for_error(response: httpx.Response) -> None:
    """Raise ServerError for any non-2xx response."""
    if response.is_success:
        return
    raise ServerError(response.status_code, error_detail(response))


def decode_body(response: httpx.Response) -> Any:
    """Decode a successful response.

    Returns:
        The parsed JSON body, or NO_CONTENT for 204 responses, non-JSON
        content types and empty JSON bodies.

    Raises:
        DecodeError: The response claims JSON but the body is not valid JSON.
    """
    if response.status_code == 204:
        return NO_CONTENT
    if not is_json_content_type(response.headers.get("content-type")):
        return NO_CONTENT

    text = response.text
    if not text.strip():
        return NO_CONTENT

    try:
        return json.loads(text)
    except ValueError as e:
        raise DecodeError(
            f"Invalid JSON in response (HTTP {response.status_code}): {e}"
        ) from e


def unwrap_list(data: Any, key: str) -> list[Any]:
    """Accept either a bare JSON list or ``{key: [...]}``; NO_CONTENT is empty."""
    if data is NO_CONTENT:
        return []
    if isinstance(data, dict):
        data = data.get(key, [])
    return list(data)
