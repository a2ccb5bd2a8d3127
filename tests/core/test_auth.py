"""Tests for token validation, resolution and keyring storage."""

from unittest.mock import MagicMock

import keyring.errors
import pytest
from keyring.backends import fail

from ghbin.core.auth import (
    KeyringAccessError,
    KeyringTokenStore,
    KeyringUnavailableError,
    RateLimitTracker,
    resolve_token,
    validate_github_token,
)

CLASSIC = "a" * 40
PAT = "ghp_" + "A" * 36


@pytest.fixture
def working_keyring(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pretend a real keyring backend is installed."""
    monkeypatch.setattr("keyring.get_keyring", lambda: MagicMock())


@pytest.mark.parametrize(
    "token",
    [CLASSIC, PAT, "github_pat_" + "b" * 40, "ghs_" + "1" * 40, f" {PAT} "],
)
def test_validate_github_token_valid(token: str) -> None:
    """Test classic and prefixed token formats are accepted."""
    assert validate_github_token(token)


@pytest.mark.parametrize(
    "token",
    [
        None,
        "",
        "   ",
        "bad-token",
        "ghp_short",
        "A" * 40,
        "ghp_" + "a" * 300,
    ],
)
def test_validate_github_token_invalid(token: str | None) -> None:
    """Test malformed tokens are rejected."""
    assert not validate_github_token(token)


def test_resolve_token_prefers_explicit() -> None:
    """Test --token wins over the environment and the keyring."""
    store = MagicMock()

    token = resolve_token(PAT, {"GITHUB_TOKEN": CLASSIC}, store)

    assert token == PAT
    store.get.assert_not_called()


def test_resolve_token_from_environment() -> None:
    """Test GITHUB_TOKEN is used when no flag is given."""
    store = MagicMock()

    assert resolve_token(None, {"GITHUB_TOKEN": f" {CLASSIC}\n"}, store) == (
        CLASSIC
    )


def test_resolve_token_from_keyring() -> None:
    """Test the keyring is consulted last."""
    store = MagicMock()
    store.get.return_value = PAT

    assert resolve_token(None, {"GITHUB_TOKEN": "  "}, store) == PAT


def test_resolve_token_none() -> None:
    """Test no source yields an anonymous run."""
    store = MagicMock()
    store.get.return_value = None

    assert resolve_token(None, {}, store) is None


def test_resolve_token_unexpected_format_warns(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Test an odd-looking token is still used but warned about."""
    token = resolve_token("custom-token", {}, MagicMock())

    assert token == "custom-token"
    assert "unexpected format" in caplog.text
    assert "custom-token" not in caplog.text


def test_store_get(
    working_keyring: None, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test the stored token is read under the service name."""
    calls = []

    def get_password(service: str, username: str) -> str:
        calls.append((service, username))
        return PAT

    monkeypatch.setattr("keyring.get_password", get_password)

    assert KeyringTokenStore().get() == PAT
    assert calls == [("ghbin-github-token", "token")]


def test_store_get_backend_error(
    working_keyring: None, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test backend failures read as no token."""
    monkeypatch.setattr(
        "keyring.get_password",
        MagicMock(side_effect=RuntimeError("dbus unavailable")),
    )

    assert KeyringTokenStore().get() is None


def test_store_without_backend(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test the fail backend disables the store."""
    monkeypatch.setattr("keyring.get_keyring", lambda: fail.Keyring())
    store = KeyringTokenStore()

    assert not store.is_available()
    assert store.get() is None
    with pytest.raises(KeyringUnavailableError):
        store.set(PAT)


def test_store_set(
    working_keyring: None, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test set writes through to keyring."""
    set_password = MagicMock()
    monkeypatch.setattr("keyring.set_password", set_password)

    KeyringTokenStore(service="svc").set(PAT)

    set_password.assert_called_once_with("svc", "token", PAT)


def test_store_set_rejected(
    working_keyring: None, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test backend write errors become KeyringAccessError."""
    monkeypatch.setattr(
        "keyring.set_password",
        MagicMock(side_effect=keyring.errors.PasswordSetError("locked")),
    )

    with pytest.raises(KeyringAccessError, match="locked"):
        KeyringTokenStore().set(PAT)


def test_store_delete(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test delete reports whether a token was stored."""
    monkeypatch.setattr("keyring.delete_password", MagicMock())
    assert KeyringTokenStore().delete()

    monkeypatch.setattr(
        "keyring.delete_password",
        MagicMock(side_effect=keyring.errors.PasswordDeleteError()),
    )
    assert not KeyringTokenStore().delete()


def test_rate_limit_tracker_updates() -> None:
    """Test headers are recorded and exhaustion is detected."""
    tracker = RateLimitTracker()
    tracker.update(
        {"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "4102444800"}
    )

    assert tracker.remaining == 0
    assert tracker.is_exhausted()
    assert tracker.reset_in_seconds() > 0


def test_rate_limit_tracker_warns_when_low(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Test a low remaining quota is logged."""
    RateLimitTracker().update({"X-RateLimit-Remaining": "3"})

    assert "rate limit low" in caplog.text


def test_rate_limit_tracker_ignores_bad_headers() -> None:
    """Test missing or malformed headers leave the state unknown."""
    tracker = RateLimitTracker()
    tracker.update({})
    tracker.update({"X-RateLimit-Remaining": "many"})

    assert tracker.remaining is None
    assert not tracker.is_exhausted()
    assert tracker.reset_in_seconds() == 0
