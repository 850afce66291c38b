"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables
    or a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "khqr-gateway"
    app_version: str = "0.1.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Merchant
    bakong_account_id: str | None = None
    merchant_name: str | None = None
    merchant_city: str = "Phnom Penh"
    merchant_phone: str | None = None

    # Bakong API
    bakong_api_token: str | None = None
    bakong_api_base_url: str = "https://api-bakong.nbc.org.kh"
    bakong_api_timeout_ms: int = 10000
    bakong_status_timeout_ms: int = 18000
    bakong_deeplink_timeout_ms: int = 3500
    bakong_api_retry_attempts: int = 1
    bakong_api_retry_delay_ms: int = 450
    bakong_ipv4_fallback: bool = True

    # Payment flow
    deeplink_mode: str = "async"
    demo_manual_settle_enabled: bool = True
    qr_expiration_minutes: int = 10

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator(
        "bakong_account_id",
        "merchant_name",
        "merchant_phone",
        "bakong_api_token",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str):
            return value.strip() or None
        return value

    @property
    def deeplink_in_background(self) -> bool:
        return self.deeplink_mode.lower() != "sync"

    @property
    def merchant_configured(self) -> bool:
        return bool(self.bakong_account_id and self.merchant_name)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
