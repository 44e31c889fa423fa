"""Configuration settings for the application."""
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
ROOT_DIR = BASE_DIR.parent.parent

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:3001",
    "http://127.0.0.1:3001",
]


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=str((ROOT_DIR / ".env").resolve()),
        case_sensitive=False,
        extra="ignore",
    )

    # Supabase configuration (series store)
    supabase_url: str = os.getenv("SUPABASE_URL", "")
    supabase_service_role_key: str = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
    stores_table: str = "stores"
    series_table: str = "store_series"

    # OpenRouter configuration (optional recommendation text)
    openrouter_api_key: str = os.getenv("OPENROUTER_API_KEY", "")
    openrouter_model: str = "openai/gpt-4o-mini"
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_site_url: Optional[str] = None
    openrouter_app_title: Optional[str] = None

    generation_timeout: float = Field(
        default=15.0,
        ge=1,
        le=120,
        description="Seconds to wait for the text generation service before falling back",
    )
    generation_temperature: float = Field(default=0.25, ge=0, le=2)
    generation_max_tokens: int = Field(default=120, ge=16, le=1024)

    # Scoring
    report_timezone: str = "America/New_York"
    trend_window: int = Field(
        default=7,
        ge=1,
        le=60,
        description="Number of prior days averaged for rolling sales growth",
    )

    # CORS configuration
    cors_origins: List[str] = Field(default_factory=lambda: DEFAULT_CORS_ORIGINS.copy())
    cors_origin_regex: str | None = Field(default=None)
    cors_allow_all: bool = Field(default=False)

    # API configuration
    api_version: str = "v1"
    debug: bool = os.getenv("DEBUG", "False").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def supabase_configured(settings: Settings) -> bool:
    """Return True when Supabase keys are present and not placeholders."""
    key = (settings.supabase_service_role_key or "").strip()
    url = (settings.supabase_url or "").strip()
    if not key or not url:
        return False
    if key.lower().startswith("your_"):
        return False
    return True


def _fetch_secret_from_supabase(settings: Settings, secret_key: str) -> Optional[str]:
    """Load a secret from Supabase config table using the service role key."""
    if not supabase_configured(settings):
        return None

    try:
        from supabase import create_client

        client = create_client(settings.supabase_url, settings.supabase_service_role_key)
        response = (
            client.table("app_config")
            .select("value")
            .eq("key", secret_key)
            .single()
            .execute()
        )
        if response.data:
            return response.data.get("value")
    except Exception as exc:  # noqa: BLE001
        logger.warning("Unable to fetch %s from Supabase: %s", secret_key, exc)
    return None


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    settings = Settings()

    if not settings.openrouter_api_key:
        secret = _fetch_secret_from_supabase(settings, "OPENROUTER_API_KEY")
        if secret:
            settings.openrouter_api_key = secret

    return settings
