from __future__ import annotations

from datetime import timedelta

import pytest
from pydantic import ValidationError

from loginflow.infrastructure.cookies import SessionCookieSettings
from loginflow.shared.config import AppConfig, SecurityConfig, SessionConfig


def test_defaults() -> None:
    config = AppConfig(SECRET_KEY="s3cret")

    assert config.session.cookie_name == "__session"
    assert config.session.expiration == timedelta(days=30)
    assert config.security.cookie_samesite == "Lax"
    assert config.use_secure_cookies() is False


def test_session_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SESSION_COOKIE_NAME", "en_session")
    monkeypatch.setenv("SESSION_EXPIRATION_DAYS", "7")

    session = SessionConfig()

    assert session.cookie_name == "en_session"
    assert session.expiration == timedelta(days=7)


def test_samesite_is_validated() -> None:
    assert SecurityConfig(cookie_samesite="strict").cookie_samesite == "Strict"
    with pytest.raises(ValidationError):
        SecurityConfig(cookie_samesite="sometimes")


def test_production_forces_secure_cookies() -> None:
    config = AppConfig(APP_ENV="production", SECRET_KEY="a-long-random-secret-value")

    settings = SessionCookieSettings.from_config(config)

    assert settings.secure is True
    assert settings.secret_key == "a-long-random-secret-value"


def test_production_refuses_default_secret() -> None:
    with pytest.raises(SystemExit):
        AppConfig(APP_ENV="production", SECRET_KEY="dev")
