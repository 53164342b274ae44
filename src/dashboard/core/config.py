"""
Application configuration using Pydantic Settings.

All configuration is loaded from environment variables or a local .env file.
"""

from functools import lru_cache
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Countries Admin"
    APP_ENV: str = "development"
    DEBUG: bool = False

    # External REST API
    API_BASE_URL: str = "http://localhost:8000/api/v1"
    API_TIMEOUT_SECONDS: float = 10.0
    API_AUTH_TOKEN: str | None = None  # Bearer token for /admin endpoints

    # Localization - i18next-style resources file {lang: {"translation": {...}}}
    I18N_CATALOG_PATH: str | None = None
    I18N_LANGUAGE: str = "en"
    I18N_FALLBACK_LANGUAGE: str = "en"

    # Per-browser screen state
    SESSION_COOKIE_NAME: str = "countries_session"
    SESSION_COOKIE_SECURE: bool = False
    SESSION_MAX_ACTIVE: int = 500  # Least recently used sessions are dropped beyond this

    # Navigation
    DASHBOARD_URL: str = "/"

    @field_validator("API_BASE_URL")
    @classmethod
    def validate_base_url(cls, v: str, info: Any) -> str:
        """Validate that the API base URL is absolute."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"{info.field_name} must be an absolute http(s) URL")
        return v.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
