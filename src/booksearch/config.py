"""
booksearch Configuration

Settings are loaded from:
1. Environment variables (prefixed with BOOKSEARCH_)
2. A .env file in the working directory

Key settings:
- BOOKSEARCH_SITE_ROOT: Base URL (or directory) of the built book
- BOOKSEARCH_INDEX_PATH: Index document path relative to the site root
- BOOKSEARCH_HOTKEY: Key that opens the search bar
"""

import logging
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """booksearch configuration settings."""

    # Where the book lives; result links and the index path are resolved against it
    site_root: str = "http://localhost:3000/"
    index_path: str = "searchindex.json"

    # URL parameter names
    search_param: str = "search"
    highlight_param: str = "highlight"

    # Keyboard
    hotkey: str = "s"

    log_level: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="BOOKSEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("site_root")
    @classmethod
    def _ensure_trailing_slash(cls, value: str) -> str:
        if value and not value.endswith("/"):
            return value + "/"
        return value

    @field_validator("hotkey")
    @classmethod
    def _single_key(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError("BOOKSEARCH_HOTKEY must be a single character")
        return value.lower()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load and cache settings."""
    return Settings()


def reload_settings() -> Settings:
    """Clear cached settings (useful for tests) and reload."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["Settings", "get_settings", "reload_settings"]
