"""
Shared API Dependencies

Session resolution and per-request store construction.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from goalsportal.config import settings
from goalsportal.core.database import get_db
from goalsportal.identity import IdentityClient, IdentityError, IdentityUser
from goalsportal.records import RecordStore

logger = logging.getLogger(__name__)


def get_identity_client() -> IdentityClient:
    """Identity provider client configured from settings."""
    return IdentityClient.from_settings()


def get_access_token(request: Request) -> str | None:
    """Access token from the Authorization header, falling back to the session cookie."""
    authorization = request.headers.get("Authorization", "")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return request.cookies.get(settings.SESSION_COOKIE_NAME) or None


async def get_current_user(
    token: str | None = Depends(get_access_token),
    identity: IdentityClient = Depends(get_identity_client),
) -> IdentityUser:
    """The signed-in user.

    Raises:
        HTTPException: 401 when there is no valid session, 503 when the
            identity provider can't be reached
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        user = await identity.get_current_user(token)
    except IdentityError as e:
        logger.error(f"Could not resolve session: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Identity provider unavailable",
        ) from e

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_store(
    user: IdentityUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> RecordStore:
    """Record store bound to the signed-in user."""
    return RecordStore(db, user.email)
