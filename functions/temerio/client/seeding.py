"""
Once-per-session trigger for the server's first-run seed.
"""

from __future__ import annotations

import logging
from typing import Optional

import requests

from temerio.client.api import TemerioApiClient
from temerio.client.config import UserSession

logger = logging.getLogger(__name__)


def run_first_run_seed(
    api: TemerioApiClient, session: Optional[UserSession]
) -> Optional[dict]:
    """
    Ask the service to seed the account the first time this session sees it.

    The guard flips before the request goes out, so a failing seed is not
    retried within the same session. Failures are logged, never raised.
    """
    if session is None or session.seeded:
        return None
    session.seeded = True

    try:
        result = api.invoke("first-run-seed")
    except requests.RequestException as exc:
        logger.warning("First-run seed request failed: %s", exc)
        return None
    if result.error is not None:
        logger.warning("First-run seed failed (%s): %s", result.status, result.error)
        return None
    return result.data
