"""Webhook relay configuration."""

from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Environment-driven settings for the webhook relay."""

    shopify_webhook_secret: str | None = None
    webhook_fail_closed: bool = False

    host: str = "0.0.0.0"
    port: int = 3000

    invite_api_url: str = "https://husband.fly.dev/invite"
    invite_api_timeout: float = 30.0

    # Recipient used by the /test-webhook sample order
    test_customer_email: str = "test@example.com"

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}

    @field_validator("shopify_webhook_secret")
    @classmethod
    def _blank_secret_is_unset(cls, value: str | None) -> str | None:
        return value or None


@lru_cache
def get_settings() -> Settings:
    """Build settings once per process."""
    return Settings()
