"""
Auth Schemas

Request/response models for the one-time-code sign-in flow.
"""

from pydantic import BaseModel, Field


class OneTimeCodeRequest(BaseModel):
    """Ask the identity provider to email a sign-in code."""

    email: str = Field(..., min_length=3, max_length=320)


class OneTimeCodeVerify(BaseModel):
    """Exchange an emailed code for a session."""

    email: str = Field(..., min_length=3, max_length=320)
    code: str = Field(..., min_length=4, max_length=12, pattern=r"^\d+$")


class SessionResponse(BaseModel):
    """Session issued after a successful verification."""

    email: str
    access_token: str
    token_type: str = "bearer"
    expires_in: int | None = None


class MeResponse(BaseModel):
    """Who the caller is."""

    email: str
    is_admin: bool


class AdminCheckResponse(BaseModel):
    is_admin: bool
