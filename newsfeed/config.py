"""Configuration management for the Punto Pe news feed."""

from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # LLM Configuration (optional - feeds degrade to mock data without it)
    gemini_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY"),
    )
    gemini_model: str = "gemini-2.5-flash"
    search_tool: str = "google_search"

    # Feed cache
    cache_ttl_seconds: int = 120
    cache_prefix: str = "puntope_cache"
    comments_prefix: str = "puntope_comments"
    cache_dir: Optional[Path] = None
    storage_quota_bytes: Optional[int] = None

    # Session
    auto_refresh_interval: float = 60.0
    timezone: str = "America/Lima"

    # Fault tolerance for the generation endpoint
    circuit_failure_threshold: int = 3
    circuit_reset_timeout: float = 60.0

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Application Settings
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def has_credentials(self) -> bool:
        """Check if a Gemini API key is configured."""
        return bool(self.gemini_api_key and self.gemini_api_key.strip())

    @property
    def cache_ttl_ms(self) -> int:
        return self.cache_ttl_seconds * 1000


def get_settings() -> Settings:
    """Get application settings.

    Loads settings from environment variables and the .env file. A fresh
    instance is built on every call so tests can patch the environment.
    """
    return Settings()
