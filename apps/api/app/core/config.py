"""Application configuration for the meeting authority service."""
from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_TOKEN_TTL_SECONDS = 7200
DEFAULT_MEETING_TTL_HOURS = 24
DEFAULT_CODE_ATTEMPTS = 3

REQUIRED_SETTINGS: dict[str, str] = {
    "livekit_api_key": "LIVEKIT_API_KEY",
    "livekit_api_secret": "LIVEKIT_API_SECRET",
    "livekit_url": "LIVEKIT_URL",
    "database_url": "DATABASE_URL",
}


class Settings(BaseSettings):
    """Runtime configuration."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_env: str = Field(default="development")
    service_name: str = Field(default="Meeting Authority")
    service_version: str = Field(default="1.0.0")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)
    log_level: str = Field(default="INFO")
    cors_allow_origins: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])
    strict_config: bool = Field(default=False)

    livekit_url: str = Field(default="")
    livekit_api_key: str = Field(default="")
    livekit_api_secret: str = Field(default="")

    database_url: str = Field(default="")
    database_ssl_required: bool = Field(default=False)

    token_ttl_seconds: int = Field(default=DEFAULT_TOKEN_TTL_SECONDS, ge=1)
    meeting_ttl_hours: int = Field(default=DEFAULT_MEETING_TTL_HOURS, ge=1)
    meeting_code_attempts: int = Field(default=DEFAULT_CODE_ATTEMPTS, ge=1)

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: object) -> object:
        """Allow comma-separated env values for CORS origins."""

        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @property
    def database_async_url(self) -> str:
        """Return the DSN rewritten for the asyncpg driver."""

        url = self.database_url
        for prefix in ("postgres://", "postgresql://"):
            if url.startswith(prefix):
                return "postgresql+asyncpg://" + url[len(prefix):]
        return url

    def missing_required(self) -> list[str]:
        """Names of required environment variables that are unset."""

        return [env for attr, env in REQUIRED_SETTINGS.items() if not getattr(self, attr).strip()]


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()
