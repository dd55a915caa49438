"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_key: str
    esv_api_key: str | None = None
    esv_base_url: str = "https://api.esv.org/v3"
    public_base_url: str = "http://localhost:8080"
    realtime_backend: str = "memory"
    settings_file: str = ".presentation-settings.json"
    cors_allow_origins: str = "*"
    owner_user_id: str | None = None
    workspace_token: str | None = None
    passage_cache_ttl_seconds: int = 3600
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_allowed_origins(raw: str | None) -> list[str]:
    """Parse CORS origins from env, defaulting to any origin."""
    if raw is None:
        return ["*"]
    origins = [chunk.strip() for chunk in raw.split(",") if chunk.strip()]
    return origins or ["*"]
