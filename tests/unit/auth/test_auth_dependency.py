"""Unit tests for authentication dependencies."""

from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from api.dependencies.auth import (
    get_access_token,
    get_current_user,
    get_optional_user,
    require_session,
)
from core.exceptions import AuthenticationError, ErrorCode, SessionRequiredError
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser


@pytest.fixture
def mock_auth_provider() -> JWTAuthProvider:
    return JWTAuthProvider(secret_key="test-secret", algorithm="HS256", expire_minutes=30)


@pytest.fixture
def test_token_user() -> TokenUser:
    return TokenUser(id=uuid4(), email="test@example.com", display_name="Test User")


def _request(cookies: dict[str, str] | None = None, path: str = "/", query: str = "") -> MagicMock:
    request = MagicMock()
    request.cookies = cookies or {}
    request.url.path = path
    request.url.query = query
    return request


# --- get_access_token ---


class TestGetAccessToken:
    def test_bearer_header_wins_over_cookie(self):
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials="header-token")
        request = _request({"sb-access-token": "cookie-token"})

        assert get_access_token(request, credentials) == "header-token"

    def test_falls_back_to_cookie(self):
        request = _request({"sb-access-token": "cookie-token"})

        assert get_access_token(request, None) == "cookie-token"

    def test_none_without_header_or_cookie(self):
        assert get_access_token(_request(), None) is None

    def test_empty_cookie_counts_as_missing(self):
        assert get_access_token(_request({"sb-access-token": ""}), None) is None


# --- get_current_user ---


class TestGetCurrentUser:
    @pytest.mark.asyncio
    async def test_returns_user_with_valid_token(
        self, mock_auth_provider: JWTAuthProvider, test_token_user: TokenUser
    ):
        token = mock_auth_provider.create_token(test_token_user)

        result = await get_current_user(token, mock_auth_provider)

        assert result.email == test_token_user.email
        assert result.id == test_token_user.id

    @pytest.mark.asyncio
    async def test_raises_when_no_token(self, mock_auth_provider: JWTAuthProvider):
        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_user(None, mock_auth_provider)

        assert exc_info.value.error_code == ErrorCode.UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_raises_when_invalid_token(self, mock_auth_provider: JWTAuthProvider):
        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_user("invalid.jwt.token", mock_auth_provider)

        assert exc_info.value.error_code == ErrorCode.INVALID_TOKEN

    @pytest.mark.asyncio
    async def test_raises_when_expired_token(self, test_token_user: TokenUser):
        expired = JWTAuthProvider(secret_key="test-secret", algorithm="HS256", expire_minutes=-1)
        token = expired.create_token(test_token_user)
        provider = JWTAuthProvider(secret_key="test-secret", algorithm="HS256", expire_minutes=30)

        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_user(token, provider)

        assert exc_info.value.error_code == ErrorCode.INVALID_TOKEN

    @pytest.mark.asyncio
    async def test_rejects_token_signed_with_other_secret(self, test_token_user: TokenUser):
        forged = JWTAuthProvider(secret_key="other", algorithm="HS256", expire_minutes=30)
        provider = JWTAuthProvider(secret_key="test-secret", algorithm="HS256", expire_minutes=30)

        with pytest.raises(AuthenticationError):
            await get_current_user(forged.create_token(test_token_user), provider)


# --- get_optional_user ---


class TestGetOptionalUser:
    @pytest.mark.asyncio
    async def test_returns_user_with_valid_token(
        self, mock_auth_provider: JWTAuthProvider, test_token_user: TokenUser
    ):
        token = mock_auth_provider.create_token(test_token_user)

        result = await get_optional_user(token, mock_auth_provider)

        assert result is not None
        assert result.email == test_token_user.email

    @pytest.mark.asyncio
    async def test_returns_none_without_token(self, mock_auth_provider: JWTAuthProvider):
        assert await get_optional_user(None, mock_auth_provider) is None

    @pytest.mark.asyncio
    async def test_returns_none_for_invalid_token(self, mock_auth_provider: JWTAuthProvider):
        assert await get_optional_user("invalid.jwt.token", mock_auth_provider) is None


# --- require_session ---


class TestRequireSession:
    @pytest.mark.asyncio
    async def test_passes_user_through(self, test_token_user: TokenUser):
        assert await require_session(_request(), test_token_user) is test_token_user

    @pytest.mark.asyncio
    async def test_signed_out_carries_path_and_query(self):
        request = _request(path="/app/dashboard", query="period=daily")

        with pytest.raises(SessionRequiredError) as exc_info:
            await require_session(request, None)

        assert exc_info.value.redirect_to == "/app/dashboard?period=daily"
        assert exc_info.value.status_code == 303

    @pytest.mark.asyncio
    async def test_signed_out_without_query(self):
        with pytest.raises(SessionRequiredError) as exc_info:
            await require_session(_request(path="/app/goals"), None)

        assert exc_info.value.redirect_to == "/app/goals"
