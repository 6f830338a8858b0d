"""
Configuration and settings for the Temerio account service.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service.

    Environment variable names match the field names (``DATABASE_URL``,
    ``STRIPE_SECRET_KEY``, ...).
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")
    log_level: str = Field(default="INFO")

    # Database (Postgres expected)
    database_url: Optional[str] = Field(default=None)

    # Managed auth provider (Supabase Auth)
    supabase_url: Optional[str] = Field(default=None)
    supabase_anon_key: Optional[str] = Field(default=None)

    # Billing (Stripe REST API)
    stripe_secret_key: Optional[str] = Field(default=None)
    stripe_api_base: str = Field(default="https://api.stripe.com/v1")
    stripe_price_monthly: str = Field(default="price_1SwARkAiLddHHjhksog7rD13")
    stripe_price_yearly: str = Field(default="price_1SwARzAiLddHHjhkwQN8DL8A")
    stripe_product_monthly: str = Field(default="prod_TtyOJLXaidU0LM")
    stripe_product_yearly: str = Field(default="prod_TtyOhH8Z4ZFaM5")
    checkout_success_url: str = Field(
        default="https://temerio.com/settings?checkout=success"
    )
    checkout_cancel_url: str = Field(
        default="https://temerio.com/pricing?checkout=cancelled"
    )

    # Device pairing
    pairing_code_ttl_seconds: int = Field(default=600)

    # Outbound HTTP
    request_timeout_seconds: float = Field(default=30.0)

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "TEMERIO_USE_IN_MEMORY_BACKENDS", "use_in_memory_backends"
        ),
    )

    @property
    def price_ids(self) -> dict[str, str]:
        return {
            "monthly": self.stripe_price_monthly,
            "yearly": self.stripe_price_yearly,
        }

    @property
    def pro_product_ids(self) -> set[str]:
        return {self.stripe_product_monthly, self.stripe_product_yearly}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
