"""
First-run seeding: every account starts with a "Self" person and one moment.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from temerio.auth import AuthenticatedUser
from temerio.db import DbClient, MomentRecord, utcnow

logger = logging.getLogger(__name__)

SELF_LABEL = "Self"
WELCOME_HEADLINE = "Temerio account created"
WELCOME_DESCRIPTION = "Created a Temerio account."


@dataclass
class SeedResult:
    person_id: Optional[str] = None
    moment_id: Optional[str] = None
    created_person: bool = False
    created_moment: bool = False


def default_person_name(user: AuthenticatedUser) -> str:
    if user.display_name:
        return user.display_name
    if user.email:
        return user.email.split("@")[0]
    return "Me"


def ensure_first_run_data(
    db: DbClient,
    user: AuthenticatedUser,
    *,
    today: Optional[Callable[[], date]] = None,
) -> SeedResult:
    """
    Create the default person and moment if the user has none.

    The two checks are independent and each one swallows its own failure, so a
    partial earlier run (person without moment or the reverse) is completed
    rather than duplicated.
    """
    result = SeedResult()

    try:
        if db.count_people(user.id) == 0:
            existing = db.find_person_by_label(user.id, SELF_LABEL)
            if existing:
                result.person_id = existing.id
            else:
                person = db.create_person(
                    user.id, default_person_name(user), relationship_label=SELF_LABEL
                )
                result.person_id = person.id
                result.created_person = True
    except Exception:
        logger.exception("First-run seed: could not ensure default person for %s", user.id)

    try:
        if db.count_moments(user.id) == 0:
            moment = db.create_moment(
                MomentRecord(
                    user_id=user.id,
                    date_start=(today or (lambda: utcnow().date()))(),
                    headline_en=WELCOME_HEADLINE,
                    description_en=WELCOME_DESCRIPTION,
                    status="past_fact",
                    confidence_date=10,
                    confidence_truth=10,
                    importance=8,
                    source="manual",
                    verified=True,
                )
            )
            result.moment_id = moment.id
            result.created_moment = True
            if result.person_id:
                db.add_participant(moment.id, result.person_id)
    except Exception:
        logger.exception("First-run seed: could not ensure default moment for %s", user.id)

    if result.created_person or result.created_moment:
        logger.info(
            "Seeded user %s (person=%s, moment=%s)",
            user.id,
            result.created_person,
            result.created_moment,
        )
    return result
