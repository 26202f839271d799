"""
API Test Fixtures

The identity provider is replaced by an in-memory fake that maps bearer
tokens to emails; the database dependency is overridden with the test session.
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from goalsportal.api.deps import get_identity_client
from goalsportal.core.database import get_db
from goalsportal.identity import AuthSession, IdentityError, IdentityUser
from goalsportal.main import app

VALID_CODE = "123456"


class FakeIdentity:
    """Identity provider stand-in.

    Every email in `tokens` is a known user; its bearer token is
    ``token-<email>``.
    """

    def __init__(self, emails: list[str]):
        self.tokens = {f"token-{email}": email for email in emails}
        self.codes_sent: list[str] = []
        self.ended: list[str] = []
        self.unavailable = False

    async def get_current_user(self, access_token):
        if self.unavailable:
            raise IdentityError("Identity provider error (500): down")
        if not access_token or access_token not in self.tokens:
            return None
        return IdentityUser(id=access_token, email=self.tokens[access_token])

    async def send_one_time_code(self, email):
        if email not in self.tokens.values():
            raise IdentityError("Signups not allowed for otp")
        self.codes_sent.append(email)

    async def verify_one_time_code(self, email, code):
        if code != VALID_CODE or email not in self.tokens.values():
            raise IdentityError("Token has expired or is invalid")
        return AuthSession(
            access_token=f"token-{email}",
            expires_in=3600,
            user=IdentityUser(id=f"token-{email}", email=email),
        )

    async def end_session(self, access_token):
        self.ended.append(access_token)


@pytest.fixture
def identity() -> FakeIdentity:
    return FakeIdentity(
        ["a@x.org", "b@x.org", "c@x.org", "r@x.org", "admin@x.org", "z@x.org"]
    )


@pytest.fixture
async def client(db_session: AsyncSession, identity: FakeIdentity, roster) -> AsyncClient:
    """Create test client with database and identity overrides."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_client] = lambda: identity
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
