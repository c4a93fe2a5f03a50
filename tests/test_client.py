"""
Tests for `repositories/client.py`.

Covers contract rules:
- USERS_API_URL and USERS_API_TIMEOUT_SECONDS are optional with defaults.
- An invalid timeout is a configuration error.
"""

from __future__ import annotations

import pytest

from repositories.client import (
    DEFAULT_USERS_API_URL,
    create_http_client,
    get_users_api_timeout,
    get_users_api_url,
)


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Verify the defaults apply when nothing is configured."""

    monkeypatch.delenv("USERS_API_URL", raising=False)
    monkeypatch.delenv("USERS_API_TIMEOUT_SECONDS", raising=False)

    assert get_users_api_url() == DEFAULT_USERS_API_URL
    assert get_users_api_timeout() == 10.0


def test_configured_values(monkeypatch: pytest.MonkeyPatch) -> None:
    """Verify environment values are used, trailing slash removed."""

    monkeypatch.setenv("USERS_API_URL", "http://localhost:8080/")
    monkeypatch.setenv("USERS_API_TIMEOUT_SECONDS", "2.5")

    assert get_users_api_url() == "http://localhost:8080"
    assert get_users_api_timeout() == 2.5

    with create_http_client() as client:
        assert client.base_url.host == "localhost"
        assert client.base_url.port == 8080
        assert client.timeout.read == 2.5


@pytest.mark.parametrize("raw", ["ten", "0", "-1"])
def test_invalid_timeout(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    """Verify unusable timeouts fail loudly."""

    monkeypatch.setenv("USERS_API_TIMEOUT_SECONDS", raw)

    with pytest.raises(RuntimeError, match="USERS_API_TIMEOUT_SECONDS"):
        get_users_api_timeout()
