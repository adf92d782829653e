"""
Configuration management for the model registry.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Data-access settings, read from the environment or a .env file."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Database
    database_url: str = Field(default="sqlite+aiosqlite:///./model_registry.db")
    database_echo: bool = Field(default=False)
    pool_size: int = Field(default=20, ge=1)
    max_overflow: int = Field(default=30, ge=0)
    pool_recycle: int = Field(default=3600)
    pool_pre_ping: bool = Field(default=True)
    sqlite_foreign_keys: bool = Field(
        default=True,
        description="Issue PRAGMA foreign_keys=ON on every SQLite connection",
    )
    verify_schema_on_open: bool = Field(default=False)

    # Query defaults
    search_default_limit: int = Field(default=50, ge=1)
    page_default_limit: int = Field(default=20, ge=1)
    events_default_limit: int = Field(default=100, ge=1)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")


@lru_cache
def get_settings() -> Settings:
    """Get application settings."""
    return Settings()
