"""
Client-side subscription state with periodic refresh.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, replace
from typing import Callable, Optional

from dacite import Config, DaciteError, from_dict

from temerio.client.api import TemerioApiClient
from temerio.client.config import ClientConfig, UserSession

logger = logging.getLogger(__name__)

BYPASS_ROLES = ("admin", "premium_gift")


@dataclass
class SubscriptionState:
    is_subscribed: bool = False
    is_loading: bool = True
    product_id: Optional[str] = None
    subscription_end: Optional[str] = None
    tier: str = "free"


@dataclass
class _CheckSubscriptionPayload:
    subscribed: bool = False
    product_id: Optional[str] = None
    subscription_end: Optional[str] = None


class SubscriptionMonitor:
    """
    Tracks whether the signed-in user is subscribed.

    Admin and premium_gift sessions are subscribed without asking the server.
    A failed check keeps the previous state and only clears ``is_loading``.
    """

    def __init__(
        self,
        api: TemerioApiClient,
        session: Optional[UserSession],
        config: ClientConfig,
        *,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.api = api
        self.session = session
        self.config = config
        self._clock = clock
        self._state = SubscriptionState()
        self._last_checked: Optional[float] = None
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def state(self) -> SubscriptionState:
        with self._lock:
            return replace(self._state)

    def _set_state(self, state: SubscriptionState) -> SubscriptionState:
        with self._lock:
            self._state = state
            self._last_checked = self._clock()
            return replace(state)

    def check_status(self) -> SubscriptionState:
        session = self.session
        if session is None:
            return self._set_state(SubscriptionState(is_loading=False))

        if session.role in BYPASS_ROLES:
            return self._set_state(
                SubscriptionState(is_subscribed=True, is_loading=False, tier=session.role)
            )

        response = self.api.call("check-subscription", notify=False)
        if not response.ok:
            logger.error("Failed to check subscription: %s", response.error)
            return self._set_state(replace(self.state, is_loading=False))

        if not isinstance(response.data, dict):
            logger.error("Unexpected subscription payload: %r", response.data)
            return self._set_state(replace(self.state, is_loading=False))
        try:
            payload = from_dict(
                data_class=_CheckSubscriptionPayload,
                data=response.data,
                config=Config(check_types=False),
            )
        except DaciteError as exc:
            logger.error("Unreadable subscription payload: %s", exc)
            return self._set_state(replace(self.state, is_loading=False))
        tier = (
            "pro"
            if payload.subscribed and self.config.is_pro_product(payload.product_id)
            else "free"
        )
        return self._set_state(
            SubscriptionState(
                is_subscribed=payload.subscribed,
                is_loading=False,
                product_id=payload.product_id,
                subscription_end=payload.subscription_end,
                tier=tier,
            )
        )

    def refresh_if_due(self) -> bool:
        """Re-check once the poll interval has elapsed. Returns True if it ran."""
        if self.session is None:
            return False
        with self._lock:
            last = self._last_checked
        if last is not None and self._clock() - last < self.config.subscription_poll_interval:
            return False
        self.check_status()
        return True

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                self.refresh_if_due()
            except Exception:
                logger.exception("Subscription refresh failed")
            self._stop.wait(self.config.subscription_poll_interval)

    def start(self) -> None:
        """Poll in the background while the session is active."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="subscription-monitor", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
