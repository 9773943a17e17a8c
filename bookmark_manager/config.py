"""
Application configuration for Bookmark Manager.

Settings are read from environment variables prefixed with ``BOOKMARKS_``
and from an optional ``.env`` file in the working directory.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="BOOKMARKS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    database_url: str = "sqlite:///./bookmarks.db"

    # Exposes internal error detail in 500 responses
    debug: bool = False
    log_level: str = "INFO"

    # Comma-separated list of allowed origins
    cors_origins_str: str = Field(default="*", validation_alias="BOOKMARKS_CORS_ORIGINS")

    # Metadata scraping
    fetch_timeout: float = 10.0
    fetch_user_agent: str = "Mozilla/5.0 (compatible; BookmarkManager/1.0)"

    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from the comma-separated setting."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()
