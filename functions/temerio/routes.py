"""
HTTP routes for the Temerio account service.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, Query

from temerio import merge, pairing, seed, subscription
from temerio.auth import AuthenticatedUser
from temerio.billing import BillingClient
from temerio.config import get_settings
from temerio.db import ActivityEventRecord, DbClient
from temerio.dependencies import get_billing_client, get_current_user, get_db_client
from temerio.schemas import (
    ActivityBatchRequest,
    ActivityBatchResponse,
    ActivityEventOut,
    ActivityFeedResponse,
    CheckSubscriptionResponse,
    CreateCheckoutRequest,
    CreateCheckoutResponse,
    ErrorResponse,
    FirstRunSeedResponse,
    HealthResponse,
    MergePeopleRequest,
    MergePeopleResponse,
    PairingCodeResponse,
    UndoMergeRequest,
    UndoMergeResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    }
)


@router.get("/healthz", response_model=HealthResponse)
def healthz():
    return HealthResponse(status="ok")


@router.post("/create-checkout", response_model=CreateCheckoutResponse)
def create_checkout(
    payload: CreateCheckoutRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    billing: BillingClient = Depends(get_billing_client),
):
    url = subscription.create_checkout(billing, get_settings(), user, payload.priceId)
    return CreateCheckoutResponse(url=url)


@router.post("/check-subscription", response_model=CheckSubscriptionResponse)
def check_subscription(
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
    billing: BillingClient = Depends(get_billing_client),
):
    status = subscription.check_subscription(db, billing, user)
    return CheckSubscriptionResponse(
        subscribed=status.subscribed,
        product_id=status.product_id,
        subscription_end=status.subscription_end,
        role=status.role,
    )


@router.post("/create-pairing-code", response_model=PairingCodeResponse)
def create_pairing_code(
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    ttl = timedelta(seconds=get_settings().pairing_code_ttl_seconds)
    record = pairing.create_pairing_code(db, user.id, ttl=ttl)
    return PairingCodeResponse(code=record.code, expires_at=record.expires_at)


@router.post("/sync-merge-local-people", response_model=MergePeopleResponse)
def sync_merge_local_people(
    payload: MergePeopleRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    result = merge.merge_people(
        db, user.id, payload.primary_person_id, payload.merged_person_id
    )
    return MergePeopleResponse(
        merge_log_id=result.merge_log_id, moments_moved=result.moments_moved
    )


@router.post("/sync-undo-merge", response_model=UndoMergeResponse)
def sync_undo_merge(
    payload: UndoMergeRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    """
    Best-effort undo: the merged person comes back, moved moments stay put.
    """
    result = merge.undo_merge(db, user.id, payload.merge_log_id)
    return UndoMergeResponse(message=result.message)


@router.post("/first-run-seed", response_model=FirstRunSeedResponse)
def first_run_seed(
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    result = seed.ensure_first_run_data(db, user)
    return FirstRunSeedResponse(
        person_id=result.person_id,
        moment_id=result.moment_id,
        created_person=result.created_person,
        created_moment=result.created_moment,
    )


@router.post("/activity-events", response_model=ActivityBatchResponse, status_code=201)
def record_activity_events(
    payload: ActivityBatchRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    records = [
        ActivityEventRecord(
            actor_id=user.id,
            action=event.action,
            item_type=event.item_type,
            item_id=event.item_id,
            metadata=event.metadata,
        )
        for event in payload.events
    ]
    inserted = db.insert_activity_events(records) if records else 0
    return ActivityBatchResponse(inserted=inserted)


@router.get("/activity-events", response_model=ActivityFeedResponse)
def list_activity_events(
    limit: int = Query(50, ge=1, le=200),
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    events = db.list_activity_events(user.id, limit=limit)
    return ActivityFeedResponse(
        events=[ActivityEventOut(**event.as_dict()) for event in events]
    )
