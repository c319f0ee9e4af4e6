"""Configuration settings for the application."""
import os
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent
ROOT_DIR = BASE_DIR.parent.parent

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]


def is_usable_api_key(key: Optional[str]) -> bool:
    """Return True for a non-blank key that is not a template placeholder."""
    key = (key or "").strip()
    return bool(key) and not key.lower().startswith("your_")


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=str((ROOT_DIR / ".env").resolve()),
        case_sensitive=False,
        extra="ignore",
    )

    # Gemini AI configuration
    gemini_api_key: str = os.getenv("GEMINI_API_KEY", "")
    gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    gemini_use_sdk: bool = os.getenv("GEMINI_USE_SDK", "False").lower() == "true"

    # Gemini retry configuration
    gemini_max_retries: int = Field(
        default=2,
        ge=1,
        le=10,
        description="Maximum retry attempts for rate-limited Gemini requests"
    )
    gemini_initial_wait: int = Field(
        default=1,
        ge=1,
        le=10,
        description="Initial wait time in seconds before first retry"
    )
    gemini_max_wait: int = Field(
        default=60,
        ge=10,
        le=300,
        description="Maximum wait time in seconds between retries"
    )
    gemini_request_timeout: int = Field(
        default=60,
        ge=5,
        le=300,
        description="Seconds allowed for a single Gemini call"
    )

    # Narrative gloss around query results
    narrative_enabled: bool = os.getenv("NARRATIVE_ENABLED", "True").lower() == "true"

    # Markdown table loaded at startup instead of the bundled sample
    fund_data_file: Optional[str] = os.getenv("FUND_DATA_FILE") or None

    # CORS configuration
    cors_origins: List[str] = Field(default_factory=lambda: DEFAULT_CORS_ORIGINS.copy())
    cors_origin_regex: str | None = Field(default=None)
    cors_allow_all: bool = Field(default=False)

    # API configuration
    api_version: str = "v1"
    debug: bool = os.getenv("DEBUG", "False").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def gemini_configured(self) -> bool:
        """Return True when a usable Gemini key is present."""
        return is_usable_api_key(self.gemini_api_key)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
