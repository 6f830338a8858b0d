"""
Client-side configuration and session state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from temerio.config import Settings

DEFAULT_PRICE_IDS = {
    "monthly": "price_1SwARkAiLddHHjhksog7rD13",
    "yearly": "price_1SwARzAiLddHHjhkwQN8DL8A",
}
DEFAULT_PRO_PRODUCT_IDS = frozenset({"prod_TtyOJLXaidU0LM", "prod_TtyOhH8Z4ZFaM5"})


@dataclass
class ClientConfig:
    base_url: str = "http://localhost:8000/api"
    timeout: float = 30.0
    max_retries: int = 2
    retry_delay: float = 1.0
    activity_flush_delay: float = 1.0
    subscription_poll_interval: float = 60.0
    price_ids: dict = field(default_factory=lambda: dict(DEFAULT_PRICE_IDS))
    pro_product_ids: frozenset = DEFAULT_PRO_PRODUCT_IDS

    @classmethod
    def from_settings(cls, settings: Settings, base_url: str) -> "ClientConfig":
        """Share plan ids with a service configured from the same environment."""
        return cls(
            base_url=base_url,
            timeout=settings.request_timeout_seconds,
            price_ids=settings.price_ids,
            pro_product_ids=frozenset(settings.pro_product_ids),
        )

    def get_price_id(self, billing_cycle: str) -> str:
        try:
            return self.price_ids[billing_cycle]
        except KeyError:
            raise ValueError(f"Unknown billing cycle: {billing_cycle}") from None

    def is_pro_product(self, product_id: Optional[str]) -> bool:
        return bool(product_id) and product_id in self.pro_product_ids


@dataclass
class UserSession:
    """
    The signed-in user as the client sees it.

    ``seeded`` is the once-per-session guard for the first-run seed call.
    """

    user_id: str
    access_token: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    role: Optional[str] = None
    seeded: bool = False
