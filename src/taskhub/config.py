"""Application configuration loaded from environment variables.

Uses pydantic-settings with a ``TASKHUB_`` prefix and ``.env`` support.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

VERSION = "1.9.0"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="TASKHUB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_path: Path = Path.home() / ".taskhub" / "taskhub.db"

    # Cache
    cache_enabled: bool = False
    cache_ttl_seconds: int = 3600
    cache_max_size: int = 1000

    # API
    app_domain: str = "http://localhost:8080"
    api_host: str = "127.0.0.1"
    api_port: int = 8080

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get the process-wide settings instance."""
    return Settings()
