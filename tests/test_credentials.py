"""Tests for credentials.py — memory and file token stores, status."""
import json
import os
from datetime import datetime, timedelta

from recon_client.credentials import FileCredentialStore, MemoryCredentialStore, token_status


# ── MemoryCredentialStore ────────────────────────────────────────────

def test_memory_store_roundtrip():
    store = MemoryCredentialStore()
    assert store.get() is None

    store.set("T1", 900)
    assert store.get() == "T1"
    assert store.expires_at() > datetime.now()


def test_memory_store_overwrite():
    store = MemoryCredentialStore()
    store.set("T1", 900)
    store.set("T2", 900)
    assert store.get() == "T2"


def test_memory_store_clear():
    store = MemoryCredentialStore()
    store.set("T1", 900)
    store.clear()
    assert store.get() is None
    assert store.expires_at() is None


def test_memory_store_drops_token_past_ttl():
    store = MemoryCredentialStore()
    store.set("T1", -1)
    assert store.get() is None


# ── FileCredentialStore ──────────────────────────────────────────────

def test_file_store_persists_across_instances(tmp_path):
    FileCredentialStore(str(tmp_path)).set("T1", 900)
    assert FileCredentialStore(str(tmp_path)).get() == "T1"


def test_file_store_file_format(tmp_path):
    FileCredentialStore(str(tmp_path)).set("T1", 900)

    data = json.loads((tmp_path / "credentials.json").read_text())
    assert data["access_token"] == "T1"
    assert datetime.fromisoformat(data["expires_at"]) > datetime.now()


def test_file_store_is_private(tmp_path):
    FileCredentialStore(str(tmp_path)).set("T1", 900)
    mode = (tmp_path / "credentials.json").stat().st_mode & 0o777
    assert mode == 0o600


def test_file_store_private_before_token_written(tmp_path, monkeypatch):
    path = tmp_path / "credentials.json"
    modes = []
    real_dump = json.dump

    def dump(data, f):
        modes.append(path.stat().st_mode & 0o777)
        real_dump(data, f)

    monkeypatch.setattr(json, "dump", dump)
    old_umask = os.umask(0o022)
    try:
        FileCredentialStore(str(tmp_path)).set("T1", 900)
    finally:
        os.umask(old_umask)

    assert modes == [0o600]


def test_file_store_tightens_existing_file(tmp_path):
    path = tmp_path / "credentials.json"
    path.write_text("{}")
    path.chmod(0o644)

    FileCredentialStore(str(tmp_path)).set("T1", 900)

    assert path.stat().st_mode & 0o777 == 0o600
    assert FileCredentialStore(str(tmp_path)).get() == "T1"


def test_file_store_creates_directory(tmp_path):
    state = tmp_path / "nested" / "state"
    FileCredentialStore(str(state)).set("T1", 900)
    assert (state / "credentials.json").exists()


def test_file_store_clear(tmp_path):
    store = FileCredentialStore(str(tmp_path))
    store.set("T1", 900)
    store.clear()
    assert store.get() is None
    assert not (tmp_path / "credentials.json").exists()


def test_file_store_clear_when_missing(tmp_path):
    FileCredentialStore(str(tmp_path)).clear()


def test_file_store_expired_entry_removed(tmp_path):
    expired = (datetime.now() - timedelta(seconds=5)).isoformat()
    (tmp_path / "credentials.json").write_text(json.dumps({"access_token": "T1", "expires_at": expired}))

    store = FileCredentialStore(str(tmp_path))
    assert store.get() is None
    assert not (tmp_path / "credentials.json").exists()


def test_file_store_corrupt_file_is_empty(tmp_path):
    (tmp_path / "credentials.json").write_text("{not json")
    store = FileCredentialStore(str(tmp_path))
    assert store.get() is None
    assert store.expires_at() is None


def test_file_store_missing_token_is_empty(tmp_path):
    (tmp_path / "credentials.json").write_text(json.dumps({"expires_at": None}))
    assert FileCredentialStore(str(tmp_path)).get() is None


# ── token_status ─────────────────────────────────────────────────────

def test_status_no_token():
    status = token_status(MemoryCredentialStore())
    assert status.has_token is False
    assert status.is_expired is True
    assert status.seconds_remaining is None


def test_status_valid_token():
    store = MemoryCredentialStore()
    store.set("T1", 600)

    status = token_status(store)
    assert status.has_token is True
    assert status.is_expired is False
    assert 0 < status.seconds_remaining <= 600
