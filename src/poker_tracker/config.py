"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    cors_allowed_origins: str | None = None
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_cors_origins(raw: str | None) -> list[str]:
    """Parse allowed CORS origins from env."""
    if raw is None:
        return []
    cleaned = raw.strip()
    if cleaned == "*":
        return ["*"]
    return [origin.strip() for origin in cleaned.split(",") if origin.strip()]
