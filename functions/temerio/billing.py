"""
Billing provider abstraction for Stripe and in-memory testing.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional, Protocol

import requests

from temerio.errors import NotFoundError, TemerioError, TransientError

logger = logging.getLogger(__name__)


@dataclass
class ActiveSubscription:
    product_id: str
    current_period_end: datetime


class BillingClient(Protocol):
    """Defines the operations the API needs from the billing provider."""

    def find_customer_id(self, email: str) -> Optional[str]:
        ...

    def get_active_subscription(self, customer_id: str) -> Optional[ActiveSubscription]:
        ...

    def create_checkout_session(
        self,
        *,
        price_id: str,
        email: Optional[str],
        customer_id: Optional[str],
        success_url: str,
        cancel_url: str,
    ) -> Optional[str]:
        ...


@dataclass
class InMemoryBillingClient:
    """Test double for billing interactions."""

    base_url: str = "https://checkout.example.test/session"
    customers: Dict[str, str] = field(default_factory=dict)
    subscriptions: Dict[str, ActiveSubscription] = field(default_factory=dict)
    sessions: list = field(default_factory=list)
    calls: int = 0

    def add_customer(
        self, email: str, subscription: Optional[ActiveSubscription] = None
    ) -> str:
        customer_id = f"cus_{uuid.uuid4().hex[:14]}"
        self.customers[email] = customer_id
        if subscription:
            self.subscriptions[customer_id] = subscription
        return customer_id

    def find_customer_id(self, email: str) -> Optional[str]:
        self.calls += 1
        return self.customers.get(email)

    def get_active_subscription(self, customer_id: str) -> Optional[ActiveSubscription]:
        self.calls += 1
        return self.subscriptions.get(customer_id)

    def create_checkout_session(
        self,
        *,
        price_id: str,
        email: Optional[str],
        customer_id: Optional[str],
        success_url: str,
        cancel_url: str,
    ) -> Optional[str]:
        self.calls += 1
        session_id = f"cs_{uuid.uuid4().hex[:14]}"
        self.sessions.append(
            {
                "id": session_id,
                "price_id": price_id,
                "email": email,
                "customer_id": customer_id,
            }
        )
        return f"{self.base_url}/{session_id}"


@dataclass
class StripeBillingClient:
    """
    Thin Stripe REST client. Stripe takes form-encoded bodies and nested
    parameters in bracket notation.
    """

    secret_key: str
    api_base: str = "https://api.stripe.com/v1"
    timeout: float = 30.0

    def __post_init__(self):
        self._session = requests.Session()
        self._session.auth = (self.secret_key, "")

    def _request(self, method: str, path: str, **kwargs) -> dict:
        url = f"{self.api_base.rstrip('/')}/{path.lstrip('/')}"
        try:
            response = self._session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.warning("Stripe request %s %s failed: %s", method, path, exc)
            raise TransientError("Billing provider unavailable") from exc
        if response.status_code == 429 or response.status_code >= 500:
            raise TransientError("Billing provider unavailable")
        response.raise_for_status()
        return response.json()

    def find_customer_id(self, email: str) -> Optional[str]:
        payload = self._request("GET", "customers", params={"email": email, "limit": 1})
        customers = payload.get("data") or []
        return customers[0]["id"] if customers else None

    def get_active_subscription(self, customer_id: str) -> Optional[ActiveSubscription]:
        payload = self._request(
            "GET",
            "subscriptions",
            params={"customer": customer_id, "status": "active", "limit": 1},
        )
        subscriptions = payload.get("data") or []
        if not subscriptions:
            return None
        sub = subscriptions[0]
        items = (sub.get("items") or {}).get("data") or []
        if not items:
            raise NotFoundError("Active subscription has no items")
        product = items[0]["price"]["product"]
        if isinstance(product, dict):
            product = product["id"]
        # Newer API versions keep the billing period on the subscription item.
        period_end = sub.get("current_period_end") or items[0].get("current_period_end")
        if not period_end:
            raise TemerioError("Active subscription has no current_period_end")
        return ActiveSubscription(
            product_id=product,
            current_period_end=datetime.fromtimestamp(period_end, tz=timezone.utc),
        )

    def create_checkout_session(
        self,
        *,
        price_id: str,
        email: Optional[str],
        customer_id: Optional[str],
        success_url: str,
        cancel_url: str,
    ) -> Optional[str]:
        data = {
            "mode": "subscription",
            "line_items[0][price]": price_id,
            "line_items[0][quantity]": 1,
            "success_url": success_url,
            "cancel_url": cancel_url,
        }
        if customer_id:
            data["customer"] = customer_id
        elif email:
            data["customer_email"] = email
        payload = self._request("POST", "checkout/sessions", data=data)
        return payload.get("url")
