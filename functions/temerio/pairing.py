"""
Device pairing code issuance.
"""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable, Optional

from temerio.db import DbClient, PairingCodeRecord, utcnow
from temerio.errors import TemerioError

logger = logging.getLogger(__name__)

# Excludes I, O, 0 and 1.
PAIRING_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
PAIRING_CODE_LENGTH = 6
PAIRING_CODE_TTL = timedelta(minutes=10)


def generate_code(length: int = PAIRING_CODE_LENGTH) -> str:
    return "".join(secrets.choice(PAIRING_ALPHABET) for _ in range(length))


def create_pairing_code(
    db: DbClient,
    user_id: str,
    *,
    ttl: timedelta = PAIRING_CODE_TTL,
    now: Optional[Callable[[], datetime]] = None,
) -> PairingCodeRecord:
    """
    Persist a fresh pairing code for ``user_id`` and return it.

    Collisions are left to the storage layer's unique constraint; a failed
    insert surfaces as a 500 without retrying.
    """
    code = generate_code()
    expires_at = (now or utcnow)() + ttl
    try:
        return db.create_pairing_code(user_id, code, expires_at)
    except Exception as exc:
        logger.exception("Insert pairing code error for user %s: %s", user_id, exc)
        raise TemerioError("Failed to create pairing code") from exc
