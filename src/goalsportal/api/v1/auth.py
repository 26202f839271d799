"""
Auth API Endpoints

One-time-code sign-in against the identity provider.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from goalsportal.api.deps import (
    get_access_token,
    get_current_user,
    get_identity_client,
    get_store,
)
from goalsportal.config import settings
from goalsportal.core.schemas import (
    MeResponse,
    OneTimeCodeRequest,
    OneTimeCodeVerify,
    SessionResponse,
)
from goalsportal.core.validation import ValidationError, normalize_email
from goalsportal.identity import IdentityClient, IdentityError, IdentityUser
from goalsportal.records import RecordStore, StoreError

logger = logging.getLogger(__name__)

router = APIRouter()


def _email_or_422(raw: str) -> str:
    try:
        return normalize_email(raw)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e


@router.post("/otp", status_code=status.HTTP_202_ACCEPTED)
async def request_code(
    data: OneTimeCodeRequest, identity: IdentityClient = Depends(get_identity_client)
) -> dict[str, str]:
    """Email a one-time sign-in code."""
    email = _email_or_422(data.email)

    try:
        await identity.send_one_time_code(email)
    except IdentityError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    return {"message": "Check your email for the sign-in code."}


@router.post("/verify", response_model=SessionResponse)
async def verify_code(
    data: OneTimeCodeVerify,
    response: Response,
    identity: IdentityClient = Depends(get_identity_client),
) -> SessionResponse:
    """Exchange an emailed code for a session (also set as an HttpOnly cookie)."""
    email = _email_or_422(data.email)

    try:
        session = await identity.verify_one_time_code(email, data.code)
    except IdentityError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e)) from e

    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        session.access_token,
        max_age=session.expires_in,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )

    return SessionResponse(
        email=session.user.email,
        access_token=session.access_token,
        token_type=session.token_type,
        expires_in=session.expires_in,
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    token: str | None = Depends(get_access_token),
    identity: IdentityClient = Depends(get_identity_client),
) -> Response:
    """End the session and clear the cookie.

    The cookie is cleared even if the provider can't revoke the token.
    """
    if token:
        try:
            await identity.end_session(token)
        except IdentityError as e:
            logger.warning(f"Session revoke failed: {e}")

    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response


@router.get("/me", response_model=MeResponse)
async def me(
    user: IdentityUser = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
) -> MeResponse:
    """The signed-in user and whether they are an admin."""
    try:
        is_admin = await store.call_procedure("is_admin")
    except StoreError as e:
        logger.warning(f"Admin check failed: {e}")
        is_admin = False

    return MeResponse(email=user.email, is_admin=is_admin)
