"""CLI tests for auth command group."""
from unittest.mock import AsyncMock, MagicMock, patch

from typer.testing import CliRunner

from recon_client.commands.auth_cmd import app
from recon_client.config import Config, Settings
from recon_client.credentials import FileCredentialStore
from recon_client.decoding import NO_CONTENT
from recon_client.errors import AuthExpired, NetworkFailure, ServerError
from recon_client.models.auth import LoginResponse, TokenStatus
from recon_client.refresh import RefreshOutcome

runner = CliRunner()


def _mock_client():
    client = MagicMock()
    client.close = AsyncMock()
    client.auth.login = AsyncMock(return_value=LoginResponse(token="T1", message="Welcome back"))
    client.auth.signup = AsyncMock()
    client.auth.logout = AsyncMock()
    client.auth.get_status.return_value = TokenStatus(has_token=True, is_expired=False, seconds_remaining=900)
    client.auth.credentials.get.return_value = "T1"
    client.coordinator.ensure_fresh_token = AsyncMock(return_value=RefreshOutcome(token="T2"))
    return client


# ── login ────────────────────────────────────────────────────────────

def test_login_success():
    client = _mock_client()
    with patch("recon_client.commands.auth_cmd._build_client", return_value=client):
        result = runner.invoke(app, ["login", "-u", "alice", "-p", "s3cret", "--output", "json"])

    assert result.exit_code == 0
    assert "authenticated" in result.stdout
    assert "Welcome back" in result.stdout
    client.auth.login.assert_awaited_once_with("alice", "s3cret")
    client.close.assert_awaited_once()


def test_login_failure():
    client = _mock_client()
    client.auth.login.side_effect = ServerError(401, "Invalid credentials")
    with patch("recon_client.commands.auth_cmd._build_client", return_value=client):
        result = runner.invoke(app, ["login", "-u", "alice", "-p", "nope"])

    assert result.exit_code == 1
    assert "SERVER_ERROR" in result.stdout
    client.close.assert_awaited_once()


# ── signup ───────────────────────────────────────────────────────────

def test_signup_no_content_reports_registered():
    client = _mock_client()
    client.auth.signup.return_value = NO_CONTENT
    with patch("recon_client.commands.auth_cmd._build_client", return_value=client):
        result = runner.invoke(app, [
            "signup", "-u", "bob", "-e", "bob@example.com", "-p", "pw", "--output", "json",
        ])

    assert result.exit_code == 0
    assert "registered" in result.stdout
    client.auth.signup.assert_awaited_once_with("bob", "bob@example.com", "pw")


# ── logout ───────────────────────────────────────────────────────────

def test_logout():
    client = _mock_client()
    with patch("recon_client.commands.auth_cmd._build_client", return_value=client):
        result = runner.invoke(app, ["logout"])

    assert result.exit_code == 0
    client.auth.logout.assert_awaited_once()


# ── status ───────────────────────────────────────────────────────────

def test_status_reads_stored_token(tmp_path):
    FileCredentialStore(str(tmp_path)).set("T1", 600)
    config = Config(settings=Settings(state_dir=str(tmp_path)))

    with patch("recon_client.commands.auth_cmd.get_config", return_value=config):
        result = runner.invoke(app, ["status", "--output", "json"])

    assert result.exit_code == 0
    assert '"has_token": true' in result.stdout


def test_status_without_token(tmp_path):
    config = Config(settings=Settings(state_dir=str(tmp_path)))

    with patch("recon_client.commands.auth_cmd.get_config", return_value=config):
        result = runner.invoke(app, ["status", "--output", "json"])

    assert result.exit_code == 0
    assert '"has_token": false' in result.stdout


# ── refresh ──────────────────────────────────────────────────────────

def test_refresh_success():
    client = _mock_client()
    with patch("recon_client.commands.auth_cmd._build_client", return_value=client):
        result = runner.invoke(app, ["refresh", "--output", "json"])

    assert result.exit_code == 0
    assert "refreshed" in result.stdout
    client.coordinator.ensure_fresh_token.assert_awaited_once_with(stale_token="T1")


def test_refresh_auth_expired():
    client = _mock_client()
    client.coordinator.ensure_fresh_token.return_value = RefreshOutcome(
        error=AuthExpired("Token refresh failed (HTTP 401): revoked")
    )
    with patch("recon_client.commands.auth_cmd._build_client", return_value=client):
        result = runner.invoke(app, ["refresh"])

    assert result.exit_code == 1
    assert "AUTH_EXPIRED" in result.stdout
    assert "recon auth login" in result.stdout


def test_refresh_timeout():
    client = _mock_client()
    client.coordinator.ensure_fresh_token.return_value = RefreshOutcome(
        error=NetworkFailure("Token refresh timed out after 10.0s")
    )
    with patch("recon_client.commands.auth_cmd._build_client", return_value=client):
        result = runner.invoke(app, ["refresh"])

    assert result.exit_code == 1
    assert "NETWORK_FAILURE" in result.stdout
