from __future__ import annotations

import pytest

from pos_core.settings import Settings


def test_env_overrides_defaults(monkeypatch) -> None:
    monkeypatch.setenv("POS_API_BASE_URL", "https://pos.example.in")
    monkeypatch.setenv("POS_HTTP_READ_TIMEOUT", "12.5")
    monkeypatch.setenv("POS_SESSION_FILE", "/tmp/pos-session.json")

    settings = Settings(_env_file=None)

    assert settings.POS_API_BASE_URL == "https://pos.example.in"
    assert settings.POS_HTTP_READ_TIMEOUT == 12.5
    assert settings.POS_SESSION_FILE == "/tmp/pos-session.json"
    assert settings.POS_TOKEN_REFRESH_PATH == "/api/token/refresh/"


def test_non_http_base_url_is_rejected(monkeypatch) -> None:
    monkeypatch.setenv("POS_API_BASE_URL", "ftp://pos.example.in")
    with pytest.raises(RuntimeError, match="http or https"):
        Settings(_env_file=None)


def test_blank_route_is_rejected(monkeypatch) -> None:
    monkeypatch.setenv("POS_TOKEN_REFRESH_PATH", " ")
    with pytest.raises(RuntimeError, match="POS_TOKEN_REFRESH_PATH"):
        Settings(_env_file=None)


def test_non_positive_timeout_is_rejected(monkeypatch) -> None:
    monkeypatch.setenv("POS_HTTP_CONNECT_TIMEOUT", "0")
    with pytest.raises(RuntimeError, match="positive"):
        Settings(_env_file=None)


def test_plain_http_outside_local_only_warns(monkeypatch, caplog) -> None:
    monkeypatch.setenv("APP_ENV", "prod")
    monkeypatch.setenv("POS_API_BASE_URL", "http://pos.internal")

    with caplog.at_level("WARNING", logger="pos_core.settings"):
        settings = Settings(_env_file=None)

    assert settings.APP_ENV == "prod"
    assert "plain http" in caplog.text
