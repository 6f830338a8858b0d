"""
HTTP client for the Temerio service with retry and user-facing errors.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

import requests

from temerio.client.config import ClientConfig
from temerio.client.notify import LoggingNotifier, Notifier, NullNotifier

logger = logging.getLogger(__name__)

TRANSIENT_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})

USER_MESSAGES = {
    400: "Invalid request. Please check your input.",
    401: "Please sign in to continue.",
    403: "You don't have permission for this action.",
    404: "The requested resource was not found.",
    409: "This conflicts with an existing resource.",
    422: "The data provided is invalid.",
    429: "Too many requests. Please wait a moment.",
    500: "Server error. Please try again later.",
    502: "Service temporarily unavailable.",
    503: "Service is under maintenance.",
}

GENERIC_MESSAGE = "An unexpected error occurred."
NETWORK_MESSAGE = "Network error. Check your connection."


@dataclass
class InvokeResult:
    """One raw round trip: either ``data`` or ``error`` plus the HTTP status."""

    data: Any = None
    error: Optional[str] = None
    status: Optional[int] = None


@dataclass
class ApiResponse:
    data: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def friendly_message(status: int, fallback: Optional[str] = None) -> str:
    return USER_MESSAGES.get(status) or fallback or GENERIC_MESSAGE


def api_call(
    fn: Callable[[], InvokeResult],
    *,
    max_retries: int = 2,
    retry_delay: float = 1.0,
    notifier: Optional[Notifier] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> ApiResponse:
    """
    Run ``fn`` with retries on transient failures.

    Transient statuses and network errors are retried up to ``max_retries``
    times with linear backoff. Whatever error remains after that is reported
    through ``notifier`` exactly once.
    """
    notifier = notifier or LoggingNotifier()

    for attempt in range(max_retries + 1):
        try:
            result = fn()
        except requests.RequestException as exc:
            if attempt < max_retries:
                logger.warning("Request failed (attempt %d): %s", attempt + 1, exc)
                sleep(retry_delay * (attempt + 1))
                continue
            message = str(exc) or NETWORK_MESSAGE
            notifier.error(message)
            return ApiResponse(error=message)

        if result.error is not None:
            status = result.status or 500
            message = friendly_message(status, result.error)
            if status in TRANSIENT_STATUS_CODES and attempt < max_retries:
                logger.warning(
                    "Transient status %d (attempt %d), retrying", status, attempt + 1
                )
                sleep(retry_delay * (attempt + 1))
                continue
            notifier.error(message)
            return ApiResponse(error=message)

        return ApiResponse(data=result.data)

    return ApiResponse(error="Request failed after retries.")


class TemerioApiClient:
    """Calls the service endpoints with the session's bearer token."""

    def __init__(
        self,
        config: ClientConfig,
        access_token: Optional[str] = None,
        *,
        notifier: Optional[Notifier] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.access_token = access_token
        self.notifier = notifier or LoggingNotifier()
        self.session = session or requests.Session()
        self.sleep = sleep

    def _url(self, name: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/{name.lstrip('/')}"

    def invoke(
        self,
        name: str,
        payload: Optional[dict] = None,
        *,
        method: str = "POST",
        params: Optional[dict] = None,
    ) -> InvokeResult:
        """Single request, no retry. Network failures raise RequestException."""
        headers = {"Accept": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"

        response = self.session.request(
            method,
            self._url(name),
            json=payload if method != "GET" else None,
            params=params,
            headers=headers,
            timeout=self.config.timeout,
        )
        try:
            body = response.json()
        except ValueError:
            body = None

        if response.status_code >= 400:
            error = body.get("error") if isinstance(body, dict) else None
            return InvokeResult(
                error=error or response.reason or "Request failed",
                status=response.status_code,
            )
        return InvokeResult(data=body, status=response.status_code)

    def call(
        self,
        name: str,
        payload: Optional[dict] = None,
        *,
        method: str = "POST",
        params: Optional[dict] = None,
        notify: bool = True,
    ) -> ApiResponse:
        return api_call(
            lambda: self.invoke(name, payload, method=method, params=params),
            max_retries=self.config.max_retries,
            retry_delay=self.config.retry_delay,
            notifier=self.notifier if notify else NullNotifier(),
            sleep=self.sleep,
        )
