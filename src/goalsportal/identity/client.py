"""
Identity Provider Client

Talks to the Supabase Auth (GoTrue) REST API: emails one-time sign-in codes,
verifies them, resolves access tokens to users and ends sessions.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel

from goalsportal.config import settings

logger = logging.getLogger(__name__)


class IdentityError(Exception):
    """Identity provider error."""

    pass


class IdentityUser(BaseModel):
    """Authenticated user as reported by the identity provider."""

    id: str | None = None
    email: str


class AuthSession(BaseModel):
    """Session returned by a successful code verification."""

    access_token: str
    refresh_token: str | None = None
    expires_in: int | None = None
    token_type: str = "bearer"
    user: IdentityUser


class IdentityClient:
    """Client for the Supabase Auth REST API."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        redirect_url: str | None = None,
        timeout: float = 15.0,
    ):
        """Initialize identity client.

        Args:
            base_url: Auth API root, e.g. https://<project>.supabase.co/auth/v1
            api_key: Project anon key (sent as the `apikey` header)
            redirect_url: Where emailed sign-in links point back to
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.redirect_url = redirect_url
        self.timeout = timeout

    @classmethod
    def from_settings(cls) -> IdentityClient:
        """Create client from application settings."""
        return cls(
            base_url=settings.identity_base_url,
            api_key=settings.SUPABASE_ANON_KEY,
            redirect_url=settings.auth_redirect_url,
            timeout=settings.IDENTITY_TIMEOUT_SECONDS,
        )

    async def get_current_user(self, access_token: str | None) -> IdentityUser | None:
        """Resolve an access token to its user.

        Returns:
            The user, or None when the token is missing, expired or revoked

        Raises:
            IdentityError: If the provider can't be reached or answers oddly
        """
        if not access_token:
            return None

        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    f"{self.base_url}/user",
                    headers=self._headers(access_token),
                    timeout=self.timeout,
                )
        except httpx.HTTPError as e:
            logger.error(f"HTTP error resolving session: {e}")
            raise IdentityError(f"HTTP error: {e}") from e

        if response.status_code in (401, 403):
            return None
        if response.status_code != 200:
            raise IdentityError(self._error_message(response))

        data = self._json(response)
        if not data.get("email"):
            logger.warning("Identity provider returned a user without email")
            return None
        return IdentityUser(id=data.get("id"), email=data["email"].lower())

    async def send_one_time_code(self, email: str) -> None:
        """Email a one-time sign-in code (and magic link) to an existing user.

        Raises:
            IdentityError: If the provider rejects the request
        """
        payload: dict[str, Any] = {"email": email, "create_user": False}
        params = {"redirect_to": self.redirect_url} if self.redirect_url else None

        await self._post("/otp", payload, params=params)
        logger.info("One-time code requested", extra={"email": email})

    async def verify_one_time_code(self, email: str, code: str) -> AuthSession:
        """Exchange an emailed code for a session.

        Raises:
            IdentityError: If the code is wrong or expired
        """
        data = await self._post("/verify", {"type": "email", "email": email, "token": code})

        try:
            session = AuthSession.model_validate(data)
        except ValueError as e:
            raise IdentityError(f"Malformed session from identity provider: {e}") from e

        logger.info("One-time code verified", extra={"email": session.user.email})
        return session

    async def end_session(self, access_token: str) -> None:
        """Revoke the session behind `access_token`.

        Raises:
            IdentityError: If the provider rejects the request
        """
        await self._post("/logout", None, access_token=access_token)

    def _headers(self, access_token: str | None = None) -> dict[str, str]:
        headers = {"apikey": self.api_key, "Content-Type": "application/json"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            data = {}
        message = (
            data.get("msg")
            or data.get("error_description")
            or data.get("message")
            or data.get("error")
            or "Unknown error"
        )
        return f"Identity provider error ({response.status_code}): {message}"

    async def _post(
        self,
        path: str,
        payload: dict[str, Any] | None,
        *,
        params: dict[str, str] | None = None,
        access_token: str | None = None,
    ) -> dict[str, Any]:
        """Send a POST request to the Auth API.

        Returns:
            Decoded JSON body (empty dict for empty responses)

        Raises:
            IdentityError: If the request fails
        """
        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    f"{self.base_url}{path}",
                    json=payload,
                    params=params,
                    headers=self._headers(access_token),
                    timeout=self.timeout,
                )
        except httpx.HTTPError as e:
            logger.error(f"HTTP error calling identity provider {path}: {e}")
            raise IdentityError(f"HTTP error: {e}") from e

        if response.status_code >= 400:
            message = self._error_message(response)
            logger.warning(message, extra={"path": path})
            raise IdentityError(message)

        if response.status_code == 204 or not response.content:
            return {}
        return self._json(response)

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise IdentityError(
                f"Identity provider returned invalid JSON ({response.status_code})"
            ) from e
        if not isinstance(data, dict):
            raise IdentityError("Identity provider returned an unexpected response body")
        return data
