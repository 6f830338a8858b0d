"""
Person merge and best-effort undo.

A merge absorbs one person into another: moments and participant rows move
to the primary person, the merged person is soft-deleted with
``merged_into_person_id`` pointing at the primary, and a ``sync_merge_log``
row records a snapshot. Undo restores the merged person and closes the log,
but does not move moments back: nothing records which of the primary's
moments came from the merged person.

Each step is its own write. There is no rollback if a later step fails.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from temerio.db import DbClient
from temerio.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

UNDO_MERGE_MESSAGE = (
    "Merge undone (best-effort). The merged person has been restored. "
    "You may need to manually reassign some moments."
)


@dataclass
class MergeResult:
    merge_log_id: str
    moments_moved: int
    participants_moved: int


@dataclass
class UndoMergeResult:
    merged_person_id: str
    message: str = UNDO_MERGE_MESSAGE


def merge_people(
    db: DbClient,
    user_id: str,
    primary_person_id: Optional[str],
    merged_person_id: Optional[str],
) -> MergeResult:
    if not primary_person_id or not merged_person_id:
        raise ValidationError("primary_person_id and merged_person_id are required")
    if primary_person_id == merged_person_id:
        raise ValidationError("Cannot merge a person with themselves")

    people = {
        p.id: p for p in db.get_people(user_id, [primary_person_id, merged_person_id])
    }
    if len(people) != 2:
        raise NotFoundError("One or both people not found")
    primary = people[primary_person_id]
    merged = people[merged_person_id]

    moved_moments = db.repoint_moments(user_id, merged_person_id, primary_person_id)

    existing = set(db.list_participant_moment_ids(primary_person_id))
    merged_participations = db.list_participant_moment_ids(merged_person_id)
    for moment_id in merged_participations:
        if moment_id in existing:
            db.delete_participant(moment_id, merged_person_id)
        else:
            db.move_participant(moment_id, merged_person_id, primary_person_id)

    db.mark_person_merged(merged_person_id, primary_person_id)

    log = db.create_merge_log(
        user_id,
        primary_person_id,
        merged_person_id,
        {
            "merged_name": merged.name,
            "merged_person_uid": merged.person_uid,
            "primary_name": primary.name,
            "moments_moved": len(moved_moments),
            "participants_moved": len(merged_participations),
        },
    )
    logger.info(
        "User %s merged person %s into %s (log %s, %d moments moved)",
        user_id,
        merged_person_id,
        primary_person_id,
        log.id,
        len(moved_moments),
    )
    return MergeResult(
        merge_log_id=log.id,
        moments_moved=len(moved_moments),
        participants_moved=len(merged_participations),
    )


def undo_merge(
    db: DbClient, user_id: str, merge_log_id: Optional[str]
) -> UndoMergeResult:
    """
    Restore the person absorbed by ``merge_log_id`` and mark the log undone.

    Only an open log owned by ``user_id`` qualifies, so a second undo of the
    same log raises NotFoundError. Closing the log is conditional on
    ``undone_at`` still being empty, which also settles two racing undos.
    Restoring is idempotent: if marking the log fails after the person was
    restored, calling again is safe.
    """
    if not merge_log_id:
        raise ValidationError("merge_log_id is required")

    log = db.get_open_merge_log(merge_log_id, user_id)
    if log is None:
        raise NotFoundError("Merge log not found or already undone")

    db.restore_person(log.merged_id)
    if not db.mark_merge_log_undone(log.id):
        # Closed by a concurrent undo.
        raise NotFoundError("Merge log not found or already undone")

    logger.info(
        "User %s undid merge %s; person %s restored", user_id, log.id, log.merged_id
    )
    return UndoMergeResult(merged_person_id=log.merged_id)
