"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header

from temerio.auth import (
    AuthenticatedUser,
    AuthProvider,
    InMemoryAuthProvider,
    SupabaseAuthProvider,
    authenticate,
)
from temerio.billing import BillingClient, InMemoryBillingClient, StripeBillingClient
from temerio.config import get_settings
from temerio.db import DbClient, InMemoryDbClient, PostgresDbClient

_db_client: DbClient | None = None
_auth_provider: AuthProvider | None = None
_billing_client: BillingClient | None = None


def get_db_client() -> DbClient:
    """
    Return a singleton DB client so state persists across requests.
    """
    global _db_client
    if _db_client:
        return _db_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.database_url:
        _db_client = InMemoryDbClient()
    else:
        _db_client = PostgresDbClient(settings.database_url)
    return _db_client


def get_auth_provider() -> AuthProvider:
    global _auth_provider
    if _auth_provider:
        return _auth_provider

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.supabase_url:
        _auth_provider = InMemoryAuthProvider()
    else:
        _auth_provider = SupabaseAuthProvider(
            url=settings.supabase_url,
            anon_key=settings.supabase_anon_key or "",
            timeout=settings.request_timeout_seconds,
        )
    return _auth_provider


def get_billing_client() -> BillingClient:
    global _billing_client
    if _billing_client:
        return _billing_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.stripe_secret_key:
        _billing_client = InMemoryBillingClient()
    else:
        _billing_client = StripeBillingClient(
            secret_key=settings.stripe_secret_key,
            api_base=settings.stripe_api_base,
            timeout=settings.request_timeout_seconds,
        )
    return _billing_client


def get_current_user(
    authorization: Optional[str] = Header(default=None),
    auth: AuthProvider = Depends(get_auth_provider),
) -> AuthenticatedUser:
    """Resolve the caller from the bearer credential or raise 401."""
    return authenticate(auth, authorization)
