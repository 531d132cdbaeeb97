"""Configuration — startup validation of environment settings.

Tests cover:
    - JWT secrets shorter than 32 characters are rejected
    - NODE_ENV is accepted as an alias of ENVIRONMENT
    - postgresql:// URLs are rewritten for asyncpg
"""

import pytest
from pydantic import ValidationError

from blog_api.config import Settings

LONG_SECRET = "x" * 32


def _settings(**overrides) -> Settings:
    values = {
        "database_url": "sqlite+aiosqlite:///:memory:",
        "jwt_access_secret": LONG_SECRET,
        "jwt_refresh_secret": LONG_SECRET,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_short_access_secret_is_rejected():
    with pytest.raises(ValidationError) as exc_info:
        _settings(jwt_access_secret="too-short")
    assert "jwt_access_secret" in str(exc_info.value)


def test_short_refresh_secret_is_rejected():
    with pytest.raises(ValidationError):
        _settings(jwt_refresh_secret="x" * 31)


def test_missing_secret_is_rejected(monkeypatch):
    monkeypatch.delenv("JWT_REFRESH_SECRET", raising=False)
    with pytest.raises(ValidationError):
        Settings(
            _env_file=None,
            database_url="sqlite+aiosqlite:///:memory:",
            jwt_access_secret=LONG_SECRET,
        )


def test_node_env_alias(monkeypatch):
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    monkeypatch.setenv("NODE_ENV", "production")
    settings = _settings()
    assert settings.environment == "production"
    assert settings.is_production
    assert settings.cookie_secure


def test_unknown_environment_is_rejected(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "staging")
    with pytest.raises(ValidationError):
        _settings()


def test_postgres_url_is_rewritten_for_asyncpg():
    settings = _settings(database_url="postgresql://u:p@db:5432/blog")
    assert settings.database_url == "postgresql+asyncpg://u:p@db:5432/blog"


def test_defaults():
    settings = _settings()
    assert settings.port == 3000
    assert settings.access_token_expire_minutes == 15
    assert settings.refresh_token_expire_days == 7
