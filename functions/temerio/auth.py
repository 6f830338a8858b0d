"""
Bearer-token authentication against the managed auth provider.

The provider is only asked who a token belongs to; roles live in the
``user_roles`` table and are read through the DbClient.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol

import requests

from temerio.errors import TransientError, UnauthorizedError

logger = logging.getLogger(__name__)


@dataclass
class AuthenticatedUser:
    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None


class AuthProvider(Protocol):
    """Resolves a bearer token to the user it was issued for."""

    def get_user(self, token: str) -> Optional[AuthenticatedUser]:
        ...


def parse_bearer(authorization: Optional[str]) -> str:
    """Return the token from an ``Authorization: Bearer`` header value."""
    if not authorization or not authorization.startswith("Bearer "):
        raise UnauthorizedError()
    token = authorization[len("Bearer ") :].strip()
    if not token:
        raise UnauthorizedError()
    return token


def authenticate(provider: AuthProvider, authorization: Optional[str]) -> AuthenticatedUser:
    token = parse_bearer(authorization)
    user = provider.get_user(token)
    if user is None:
        raise UnauthorizedError()
    return user


@dataclass
class InMemoryAuthProvider:
    """Static token table for development and tests."""

    tokens: Dict[str, AuthenticatedUser] = field(default_factory=dict)

    def register(self, token: str, user: AuthenticatedUser) -> None:
        self.tokens[token] = user

    def get_user(self, token: str) -> Optional[AuthenticatedUser]:
        return self.tokens.get(token)


@dataclass
class SupabaseAuthProvider:
    """Validates tokens with the Supabase Auth ``/auth/v1/user`` endpoint."""

    url: str
    anon_key: str
    timeout: float = 30.0

    def get_user(self, token: str) -> Optional[AuthenticatedUser]:
        try:
            response = requests.get(
                f"{self.url.rstrip('/')}/auth/v1/user",
                headers={
                    "apikey": self.anon_key,
                    "Authorization": f"Bearer {token}",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Auth provider unreachable: %s", exc)
            raise TransientError("Auth provider unavailable") from exc

        if response.status_code in (401, 403):
            return None
        if response.status_code >= 500:
            raise TransientError("Auth provider unavailable")
        response.raise_for_status()

        payload = response.json()
        if not payload.get("id"):
            return None
        user_metadata = payload.get("user_metadata") or {}
        return AuthenticatedUser(
            id=payload["id"],
            email=payload.get("email"),
            display_name=user_metadata.get("display_name")
            or user_metadata.get("full_name"),
        )
