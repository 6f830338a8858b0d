"""
Starting a Stripe checkout from the client.
"""

from __future__ import annotations

import logging
import webbrowser
from typing import Callable, Optional

from temerio.client.api import TemerioApiClient
from temerio.client.notify import Notifier

logger = logging.getLogger(__name__)


class CheckoutError(Exception):
    pass


def start_checkout(
    api: TemerioApiClient,
    billing_cycle: str,
    *,
    notifier: Optional[Notifier] = None,
    opener: Callable[[str], object] = webbrowser.open,
) -> Optional[str]:
    """
    Open a checkout page for ``billing_cycle`` ("monthly" or "yearly").

    Returns the checkout URL, or None after showing a single "Checkout failed"
    notification.
    """
    notifier = notifier or api.notifier
    try:
        price_id = api.config.get_price_id(billing_cycle)
        response = api.call("create-checkout", {"priceId": price_id}, notify=False)
        if not response.ok:
            raise CheckoutError(response.error)
        data = response.data if isinstance(response.data, dict) else {}
        url = data.get("url")
        if not url:
            raise CheckoutError("No checkout URL returned")
    except (CheckoutError, ValueError) as exc:
        logger.warning("Checkout for %s failed: %s", billing_cycle, exc)
        notifier.error("Checkout failed", str(exc) or "Please try again.")
        return None

    opener(url)
    return url
