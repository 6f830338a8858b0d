"""
Subscription status and checkout on top of the billing provider.

The stored role in ``user_roles`` follows what the billing provider reports:
an active subscription promotes the user to ``premium``, losing it drops them
back to ``free``. ``admin`` and ``premium_gift`` never consult billing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from temerio.auth import AuthenticatedUser
from temerio.billing import BillingClient
from temerio.config import Settings
from temerio.db import DbClient
from temerio.errors import NotFoundError, UnauthorizedError, ValidationError

logger = logging.getLogger(__name__)

BYPASS_ROLES = ("admin", "premium_gift")


@dataclass
class SubscriptionStatus:
    subscribed: bool
    product_id: Optional[str] = None
    subscription_end: Optional[datetime] = None
    role: Optional[str] = None


def _log_step(step: str, **details) -> None:
    if details:
        logger.info("[CHECK-SUBSCRIPTION] %s - %s", step, details)
    else:
        logger.info("[CHECK-SUBSCRIPTION] %s", step)


def check_subscription(
    db: DbClient, billing: BillingClient, user: AuthenticatedUser
) -> SubscriptionStatus:
    if not user.email:
        raise UnauthorizedError("User not authenticated")
    _log_step("User authenticated", user_id=user.id)

    current_role = db.get_user_role(user.id)
    if current_role in BYPASS_ROLES:
        _log_step("User has bypass role", role=current_role)
        return SubscriptionStatus(subscribed=True, role=current_role)

    customer_id = billing.find_customer_id(user.email)
    if customer_id is None:
        _log_step("No billing customer found")
        if current_role != "free":
            db.set_user_role(user.id, "free")
            _log_step("Role reset to free")
        return SubscriptionStatus(subscribed=False)

    _log_step("Found billing customer", customer_id=customer_id)
    subscription = billing.get_active_subscription(customer_id)
    if subscription is None:
        _log_step("No active subscription")
        if current_role == "premium":
            db.set_user_role(user.id, "free")
            _log_step("Role reset to free")
        return SubscriptionStatus(subscribed=False)

    _log_step(
        "Active subscription found",
        product_id=subscription.product_id,
        subscription_end=subscription.current_period_end.isoformat(),
    )
    if current_role != "premium":
        db.set_user_role(user.id, "premium")
        _log_step("Role updated to premium")
    return SubscriptionStatus(
        subscribed=True,
        product_id=subscription.product_id,
        subscription_end=subscription.current_period_end,
    )


def create_checkout(
    billing: BillingClient,
    settings: Settings,
    user: AuthenticatedUser,
    price_id: Optional[str],
) -> str:
    """Start a subscription checkout for one of the configured prices."""
    if not price_id:
        raise ValidationError("priceId is required")
    if price_id not in settings.price_ids.values():
        raise ValidationError(f"Unknown price {price_id}")

    customer_id = billing.find_customer_id(user.email) if user.email else None
    url = billing.create_checkout_session(
        price_id=price_id,
        email=user.email,
        customer_id=customer_id,
        success_url=settings.checkout_success_url,
        cancel_url=settings.checkout_cancel_url,
    )
    if not url:
        raise NotFoundError("No checkout URL returned")
    logger.info("Created checkout for user %s (price %s)", user.id, price_id)
    return url
