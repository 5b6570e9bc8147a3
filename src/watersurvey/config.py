"""
Application configuration with environment-driven settings.

Collector endpoint, logging and API surface settings.
"""

from functools import lru_cache
import os
from enum import Enum
from typing import Literal

import httpx
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CollectorType(str, Enum):
    """Supported collector backends."""

    HTTP = "http"
    MOCK = "mock"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "watersurvey"
    app_env: Literal["dev", "qa", "uat", "prod"] = "dev"
    debug: bool = False
    log_level: str = "INFO"

    # Collector
    collector_type: CollectorType = Field(default=CollectorType.HTTP)
    collector_url: str = Field(
        default="",
        description="Spreadsheet script URL receiving one JSON row per submission",
    )
    collector_placeholder_marker: str = Field(
        default="PASTE_YOUR_SCRIPT_ID",
        description="Marker left in template URLs that were never filled in",
    )
    collector_timeout_seconds: float = Field(
        default=30.0,
        ge=1,
        le=300,
        description="HTTP timeout for the single submission request",
    )

    # Sessions
    session_ttl_seconds: int = Field(
        default=3600,
        ge=60,
        le=86400,
        description="Idle time after which an API survey session is dropped",
    )
    max_sessions: int = Field(
        default=1000,
        ge=1,
        description="Upper bound on survey sessions held in memory",
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:8000",
        description="Comma-separated list of allowed CORS origins",
    )

    @field_validator("collector_url", mode="before")
    @classmethod
    def strip_collector_url(cls, v: str) -> str:
        """Tolerate whitespace around the URL copied from the script editor."""
        return v.strip() if isinstance(v, str) else v

    @property
    def collector_configured(self) -> bool:
        """True when a real (non-placeholder) collector URL is set."""
        if not self.collector_url:
            return False
        if self.collector_placeholder_marker in self.collector_url:
            return False
        try:
            url = httpx.URL(self.collector_url)
        except httpx.InvalidURL:
            return False
        return url.scheme in ("http", "https") and bool(url.host)

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache(maxsize=1)
def _get_settings_cached() -> Settings:
    return Settings()


def get_settings() -> Settings:
    # Under pytest, env vars are monkeypatched per test: never hand out a frozen instance.
    if os.environ.get("PYTEST_CURRENT_TEST"):
        return Settings()
    return _get_settings_cached()
