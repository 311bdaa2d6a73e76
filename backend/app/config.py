"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str | None = None
    sqlite_url: str = "sqlite+aiosqlite:///./residency.db"

    # Residency rule
    residency_threshold_days: int = 183
    forecast_horizon_days: int = 366
    hypothetical_absence_years: int = 2
    merge_overlapping_trips: bool = True

    # Assistant context
    residence_country: str = "Georgia"
    assistant_language: str = "English"

    # LLM (OpenAI)
    openai_api_key: SecretStr | None = None
    openai_model: str = "gpt-4o-mini"
    openai_vision_model: str = "gpt-4o"

    # Extraction limits
    max_image_bytes: int = 5 * 1024 * 1024

    # UI
    ui_backend_url: str = "http://localhost:8000"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
