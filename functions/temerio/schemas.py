"""
Pydantic schemas for the Temerio FastAPI service.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    error: str


class CreateCheckoutRequest(BaseModel):
    priceId: Optional[str] = None


class CreateCheckoutResponse(BaseModel):
    url: str


class CheckSubscriptionResponse(BaseModel):
    subscribed: bool
    product_id: Optional[str] = None
    subscription_end: Optional[datetime] = None
    role: Optional[str] = None


class PairingCodeResponse(BaseModel):
    code: str
    expires_at: datetime


class MergePeopleRequest(BaseModel):
    primary_person_id: Optional[str] = None
    merged_person_id: Optional[str] = None


class MergePeopleResponse(BaseModel):
    success: Literal[True] = True
    merge_log_id: str
    moments_moved: int


class UndoMergeRequest(BaseModel):
    merge_log_id: Optional[str] = None


class UndoMergeResponse(BaseModel):
    success: Literal[True] = True
    message: str


class FirstRunSeedResponse(BaseModel):
    person_id: Optional[str] = None
    moment_id: Optional[str] = None
    created_person: bool
    created_moment: bool


class ActivityEventIn(BaseModel):
    action: str = Field(..., min_length=1, max_length=128)
    item_type: str = Field(..., min_length=1, max_length=64)
    item_id: Optional[str] = None
    metadata: dict = Field(default_factory=dict)


class ActivityBatchRequest(BaseModel):
    events: list[ActivityEventIn] = Field(..., max_length=500)


class ActivityBatchResponse(BaseModel):
    inserted: int


class ActivityEventOut(BaseModel):
    id: str
    actor_id: str
    action: str
    item_type: str
    item_id: Optional[str] = None
    metadata: dict
    created_at: datetime


class ActivityFeedResponse(BaseModel):
    events: list[ActivityEventOut]


class HealthResponse(BaseModel):
    status: Literal["ok"]
