"""Tests for settings parsing."""
from __future__ import annotations

from datetime import timedelta

from app.core.config import Settings


def test_database_url_is_rewritten_for_asyncpg() -> None:
    settings = Settings(_env_file=None, database_url="postgres://user:pw@db.example.supabase.co:5432/postgres")

    assert settings.database_async_url == "postgresql+asyncpg://user:pw@db.example.supabase.co:5432/postgres"


def test_non_postgres_url_is_left_alone() -> None:
    settings = Settings(_env_file=None, database_url="sqlite+aiosqlite://")

    assert settings.database_async_url == "sqlite+aiosqlite://"


def test_missing_required_lists_env_names(monkeypatch) -> None:
    for name in ("LIVEKIT_API_KEY", "LIVEKIT_API_SECRET", "LIVEKIT_URL", "DATABASE_URL"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None, livekit_url="wss://livekit.test")

    assert settings.missing_required() == ["LIVEKIT_API_KEY", "LIVEKIT_API_SECRET", "DATABASE_URL"]


def test_cors_origins_accept_comma_separated_env(monkeypatch) -> None:
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.example, https://b.example")

    settings = Settings(_env_file=None)

    assert settings.cors_allow_origins == ["https://a.example", "https://b.example"]


def test_importing_config_does_not_build_settings() -> None:
    from app.core import config

    assert not hasattr(config, "settings")


def test_meeting_defaults_share_one_source(monkeypatch) -> None:
    monkeypatch.delenv("MEETING_TTL_HOURS", raising=False)
    monkeypatch.delenv("MEETING_CODE_ATTEMPTS", raising=False)

    from app.core.config import DEFAULT_CODE_ATTEMPTS, DEFAULT_MEETING_TTL_HOURS
    from app.models.meeting import DEFAULT_MEETING_TTL
    from app.services import meetings as meetings_service

    settings = Settings(_env_file=None)
    create_defaults = meetings_service.create_meeting.__kwdefaults__

    assert settings.meeting_ttl_hours == DEFAULT_MEETING_TTL_HOURS
    assert settings.meeting_code_attempts == DEFAULT_CODE_ATTEMPTS
    assert DEFAULT_MEETING_TTL == timedelta(hours=DEFAULT_MEETING_TTL_HOURS)
    assert create_defaults["meeting_ttl"] == DEFAULT_MEETING_TTL
    assert create_defaults["code_attempts"] == DEFAULT_CODE_ATTEMPTS
