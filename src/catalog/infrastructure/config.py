"""Application configuration — environment-driven settings via pydantic-settings.

Every setting can be overridden with a ``CATALOG_``-prefixed environment
variable or a ``.env`` file. ``get_settings()`` is cached, one instance
per process.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Catalog settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_", env_file=".env", case_sensitive=False, extra="ignore"
    )

    # Storage
    data_dir: Path = Path("data")

    # Listings
    default_page_size: int = Field(default=20, ge=1)
    max_page_size: int = Field(default=100, ge=1)
    public_sales_limit: int = Field(default=10, ge=1)

    # Cache (in-process when no redis_url is set)
    redis_url: str | None = None
    cache_ttl_seconds: int = Field(default=3600, ge=1)

    # Observability
    log_level: str = "INFO"
    log_format: Literal["text", "json"] = "text"


@lru_cache
def get_settings() -> Settings:
    return Settings()
