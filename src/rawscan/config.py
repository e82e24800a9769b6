"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

KNOWN_PROVIDERS = ("usda", "off", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    fdc_api_key: str = "DEMO_KEY"
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    off_base_url: str = "https://world.openfoodfacts.org/api/v0"
    off_user_agent: str = "RawScan/1.0 (nutrition-app)"
    provider_priority: str = "usda,off,local"
    provider_timeout_seconds: float = 5.0
    provider_retry_attempts: int = 2
    provider_retry_base_delay_seconds: float = 0.3
    resolve_deadline_seconds: float = 20.0
    provider_max_requests_per_minute: int = 60
    product_cache_ttl_seconds: int | None = 172800
    swap_limit: int = 3
    rules_source: str = "builtin"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_provider_priority(raw: str) -> list[str]:
    """Parse the provider priority list from env, keeping the first occurrence."""
    names: list[str] = []
    for chunk in raw.split(","):
        value = chunk.strip().lower()
        if not value:
            continue
        if value not in KNOWN_PROVIDERS:
            raise ValueError(f"Unknown provider in priority list: {value}")
        if value not in names:
            names.append(value)
    if not names:
        raise ValueError("Provider priority list is empty")
    return names
