"""Tests for decoding.py — NO_CONTENT, error details, JSON decoding."""
import httpx
import pytest

from recon_client.decoding import (
    NO_CONTENT,
    decode_body,
    error_detail,
    is_json_content_type,
    raise_for_error,
    unwrap_list,
)
from recon_client.errors import DecodeError, ServerError


def _response(status=200, content=b"", content_type="application/json"):
    headers = {"content-type": content_type} if content_type else {}
    return httpx.Response(status, content=content, headers=headers)


# ── NO_CONTENT ───────────────────────────────────────────────────────

def test_no_content_is_falsy_singleton():
    assert not NO_CONTENT
    assert repr(NO_CONTENT) == "NO_CONTENT"
    assert type(NO_CONTENT)() is NO_CONTENT


def test_204_is_no_content():
    assert decode_body(httpx.Response(204)) is NO_CONTENT


def test_204_ignores_body_and_content_type():
    assert decode_body(_response(204, b'{"a": 1}')) is NO_CONTENT


def test_missing_content_type_is_no_content():
    assert decode_body(_response(200, b'{"a": 1}', content_type=None)) is NO_CONTENT


def test_text_plain_is_no_content():
    assert decode_body(_response(200, b"created", "text/plain")) is NO_CONTENT


def test_whitespace_json_body_is_no_content():
    assert decode_body(_response(200, b"  \n")) is NO_CONTENT


# ── JSON decoding ────────────────────────────────────────────────────

def test_decodes_object():
    assert decode_body(_response(200, b'{"id": 1}')) == {"id": 1}


def test_decodes_list_with_charset():
    resp = _response(200, b"[1, 2]", "application/json; charset=utf-8")
    assert decode_body(resp) == [1, 2]


def test_decodes_vendor_json():
    assert decode_body(_response(201, b'{"ok": true}', "application/problem+json")) == {"ok": True}


def test_invalid_json_raises_decode_error():
    with pytest.raises(DecodeError, match="HTTP 200"):
        decode_body(_response(200, b"{truncated"))


@pytest.mark.parametrize("value,expected", [
    ("application/json", True),
    ("Application/JSON; charset=utf-8", True),
    ("application/vnd.recon+json", True),
    ("text/html", False),
    ("", False),
    (None, False),
])
def test_is_json_content_type(value, expected):
    assert is_json_content_type(value) is expected


# ── Error classification ─────────────────────────────────────────────

def test_error_detail_prefers_error_field():
    resp = _response(400, b'{"error": "bad input", "message": "ignored"}')
    assert error_detail(resp) == "bad input"


def test_error_detail_falls_back_to_message():
    assert error_detail(_response(409, b'{"message": "duplicate username"}')) == "duplicate username"


def test_error_detail_uses_raw_text():
    assert error_detail(_response(502, b"Bad gateway\n", "text/plain")) == "Bad gateway"


def test_error_detail_empty_body_uses_reason_phrase():
    assert error_detail(_response(503, b"", None)) == "Service Unavailable"


def test_error_detail_json_without_known_fields_uses_text():
    assert error_detail(_response(400, b'{"code": 7}')) == '{"code": 7}'


def test_raise_for_error_passes_2xx():
    raise_for_error(_response(201, b"{}"))


def test_raise_for_error_raises_server_error():
    with pytest.raises(ServerError) as exc_info:
        raise_for_error(_response(422, b'{"error": "reconDate is required"}'))

    err = exc_info.value
    assert err.status == 422
    assert err.message == "reconDate is required"
    assert str(err) == "API error (HTTP 422): reconDate is required"


def test_raise_for_error_on_401_is_server_error():
    with pytest.raises(ServerError):
        raise_for_error(_response(401, b'{"error": "token expired"}'))


# ── unwrap_list ──────────────────────────────────────────────────────

def test_unwrap_bare_list():
    assert unwrap_list([1, 2], "users") == [1, 2]


def test_unwrap_keyed_list():
    assert unwrap_list({"users": [1]}, "users") == [1]


def test_unwrap_missing_key():
    assert unwrap_list({"other": [1]}, "users") == []


def test_unwrap_no_content():
    assert unwrap_list(NO_CONTENT, "users") == []
