"""
FastAPI Dependencies.

Shared dependencies for request handling: database session, request ID,
the authenticated caller and the auth rate limit.
"""

import uuid
from dataclasses import dataclass
from typing import Annotated

import structlog
from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from viny.backend.core.config import get_app_config
from viny.backend.core.database import get_db_session
from viny.backend.core.exceptions import AuthenticationError
from viny.backend.core.security import decode_access_token
from viny.backend.security.rate_limiter import get_rate_limiter

BEARER_PREFIX = "Bearer "

DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def get_request_id(x_request_id: str | None = Header(None)) -> str:
    """Extract or generate request ID from headers."""
    return x_request_id or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]


@dataclass(frozen=True)
class AuthUser:
    """The caller, as identified by a verified access token."""

    id: int
    email: str
    name: str | None = None


def _bearer_token(authorization: str | None) -> str:
    # Scheme is case-sensitive and exactly one space separates it from the token
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise AuthenticationError("Access token required")
    token = authorization[len(BEARER_PREFIX):]
    if not token or " " in token:
        raise AuthenticationError("Access token required")
    return token


async def get_current_user(
    authorization: str | None = Header(None),
) -> AuthUser:
    """
    Resolve the authenticated caller from ``Authorization: Bearer <token>``.

    Raises:
        AuthenticationError: If the header is missing or malformed, or the
            token is invalid or expired
    """
    payload = decode_access_token(_bearer_token(authorization))
    user = AuthUser(
        id=int(payload["sub"]),
        email=payload.get("email", ""),
        name=payload.get("name"),
    )
    structlog.contextvars.bind_contextvars(user_id=user.id)
    return user


CurrentUser = Annotated[AuthUser, Depends(get_current_user)]


async def enforce_auth_rate_limit(request: Request) -> None:
    """
    Count an authentication attempt against the caller's address.

    Raises:
        RateLimitError: If the address has used up its attempts in this window
    """
    if not get_app_config().features.auth_rate_limit_enabled:
        return
    client = request.client.host if request.client else None
    get_rate_limiter().hit(client)
