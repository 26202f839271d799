"""
Tests for the Identity Provider Client

HTTP calls are mocked at the httpx.AsyncClient level.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from goalsportal.identity import IdentityClient, IdentityError


def make_response(status_code: int, body: dict | None = None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.content = b"{}" if body is not None else b""
    response.json.return_value = body or {}
    return response


@pytest.fixture
def client() -> IdentityClient:
    return IdentityClient(
        base_url="https://demo.supabase.co/auth/v1/",
        api_key="anon-key",
        redirect_url="https://portal.example.org/auth/callback",
    )


class TestIdentityClientInitialization:
    def test_trailing_slash_stripped(self, client):
        assert client.base_url == "https://demo.supabase.co/auth/v1"

    def test_from_settings(self):
        with patch("goalsportal.identity.client.settings") as mock_settings:
            mock_settings.identity_base_url = "https://x.supabase.co/auth/v1"
            mock_settings.SUPABASE_ANON_KEY = "settings-key"
            mock_settings.auth_redirect_url = "https://portal/auth/callback"
            mock_settings.IDENTITY_TIMEOUT_SECONDS = 5.0

            identity = IdentityClient.from_settings()

            assert identity.base_url == "https://x.supabase.co/auth/v1"
            assert identity.api_key == "settings-key"
            assert identity.redirect_url == "https://portal/auth/callback"
            assert identity.timeout == 5.0


class TestGetCurrentUser:
    async def test_no_token(self, client):
        with patch("httpx.AsyncClient.get", new_callable=AsyncMock) as mock_get:
            assert await client.get_current_user(None) is None
            mock_get.assert_not_called()

    async def test_valid_token(self, client):
        with patch("httpx.AsyncClient.get", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = make_response(200, {"id": "u-1", "email": "A@X.org"})

            user = await client.get_current_user("token-a")

            assert user is not None
            assert user.email == "a@x.org"
            assert user.id == "u-1"

            call = mock_get.call_args
            assert call.args[0] == "https://demo.supabase.co/auth/v1/user"
            assert call.kwargs["headers"]["Authorization"] == "Bearer token-a"
            assert call.kwargs["headers"]["apikey"] == "anon-key"

    @pytest.mark.parametrize("status_code", [401, 403])
    async def test_expired_token(self, client, status_code):
        with patch("httpx.AsyncClient.get", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = make_response(status_code, {"msg": "invalid JWT"})

            assert await client.get_current_user("stale") is None

    async def test_server_error(self, client):
        with patch("httpx.AsyncClient.get", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = make_response(500, {"msg": "boom"})

            with pytest.raises(IdentityError, match="500"):
                await client.get_current_user("token-a")

    async def test_non_json_body(self, client):
        with patch("httpx.AsyncClient.get", new_callable=AsyncMock) as mock_get:
            response = make_response(200)
            response.json.side_effect = ValueError("Expecting value")
            mock_get.return_value = response

            with pytest.raises(IdentityError, match="invalid JSON"):
                await client.get_current_user("token-a")

    async def test_transport_error(self, client):
        with patch("httpx.AsyncClient.get", new_callable=AsyncMock) as mock_get:
            mock_get.side_effect = httpx.ConnectError("refused")

            with pytest.raises(IdentityError, match="HTTP error"):
                await client.get_current_user("token-a")


class TestOneTimeCode:
    async def test_send_code(self, client):
        with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = make_response(200, {})

            await client.send_one_time_code("a@x.org")

            call = mock_post.call_args
            assert call.args[0] == "https://demo.supabase.co/auth/v1/otp"
            assert call.kwargs["json"] == {"email": "a@x.org", "create_user": False}
            assert call.kwargs["params"] == {
                "redirect_to": "https://portal.example.org/auth/callback"
            }

    async def test_send_code_rejected(self, client):
        with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = make_response(422, {"msg": "Signups not allowed for otp"})

            with pytest.raises(IdentityError, match="Signups not allowed"):
                await client.send_one_time_code("stranger@x.org")

    async def test_verify_code(self, client):
        with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = make_response(
                200,
                {
                    "access_token": "jwt-123",
                    "refresh_token": "refresh-123",
                    "expires_in": 3600,
                    "token_type": "bearer",
                    "user": {"id": "u-1", "email": "a@x.org"},
                },
            )

            session = await client.verify_one_time_code("a@x.org", "123456")

            assert session.access_token == "jwt-123"
            assert session.expires_in == 3600
            assert session.user.email == "a@x.org"
            assert mock_post.call_args.kwargs["json"] == {
                "type": "email",
                "email": "a@x.org",
                "token": "123456",
            }

    async def test_verify_wrong_code(self, client):
        with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = make_response(
                403, {"error_description": "Token has expired or is invalid"}
            )

            with pytest.raises(IdentityError, match="expired or is invalid"):
                await client.verify_one_time_code("a@x.org", "000000")

    async def test_verify_non_json_body(self, client):
        with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
            response = make_response(200)
            response.content = b"<html>gateway</html>"
            response.json.side_effect = ValueError("Expecting value")
            mock_post.return_value = response

            with pytest.raises(IdentityError, match="invalid JSON"):
                await client.verify_one_time_code("a@x.org", "123456")

    async def test_verify_malformed_session(self, client):
        with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = make_response(200, {"access_token": "jwt"})

            with pytest.raises(IdentityError, match="Malformed session"):
                await client.verify_one_time_code("a@x.org", "123456")


class TestEndSession:
    async def test_logout(self, client):
        with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = make_response(204)

            await client.end_session("jwt-123")

            call = mock_post.call_args
            assert call.args[0] == "https://demo.supabase.co/auth/v1/logout"
            assert call.kwargs["headers"]["Authorization"] == "Bearer jwt-123"

    async def test_logout_failure(self, client):
        with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
            mock_post.side_effect = httpx.ReadTimeout("slow")

            with pytest.raises(IdentityError):
                await client.end_session("jwt-123")
