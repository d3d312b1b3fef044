"""Authentication dependencies for FastAPI.

The access token is read from the ``Authorization: Bearer`` header when
present, otherwise from the session cookie set by ``/auth/signin``.
"""

from typing import Annotated, AsyncGenerator

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.config import settings
from core.exceptions import AuthenticationError, ErrorCode, SessionRequiredError
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import IAuthProvider, TokenUser
from infrastructure.auth.supabase_client import SupabaseAuthClient, create_user_auth_client

# Security scheme for OpenAPI docs
security = HTTPBearer(auto_error=False)

# Singleton auth provider
_auth_provider: JWTAuthProvider | None = None


def get_auth_provider() -> JWTAuthProvider:
    """Get or create the auth provider singleton."""
    global _auth_provider
    if _auth_provider is None:
        _auth_provider = JWTAuthProvider()
    return _auth_provider


def get_access_token(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str | None:
    """Bearer header first, then the access token cookie."""
    if credentials:
        return credentials.credentials
    return request.cookies.get(settings.access_cookie_name) or None


AccessToken = Annotated[str | None, Depends(get_access_token)]


async def get_current_user(
    token: AccessToken,
    auth_provider: IAuthProvider = Depends(get_auth_provider),
) -> TokenUser:
    """
    Dependency to get the current authenticated user.

    Raises:
        AuthenticationError: If no token provided or token is invalid
    """
    if not token:
        raise AuthenticationError(
            message="Authentication required",
            error_code=ErrorCode.UNAUTHORIZED,
        )

    user = await auth_provider.validate_token(token)
    if not user:
        raise AuthenticationError(
            message="Invalid or expired token",
            error_code=ErrorCode.INVALID_TOKEN,
        )

    return user


async def get_optional_user(
    token: AccessToken,
    auth_provider: IAuthProvider = Depends(get_auth_provider),
) -> TokenUser | None:
    """The current user if authenticated, None otherwise."""
    if not token:
        return None
    return await auth_provider.validate_token(token)


async def require_session(
    request: Request,
    user: Annotated[TokenUser | None, Depends(get_optional_user)],
) -> TokenUser:
    """Session guard for page routes: redirect to sign-in when signed out."""
    if user is None:
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        raise SessionRequiredError(redirect_to=target)
    return user


async def get_auth_client() -> AsyncGenerator[SupabaseAuthClient, None]:
    """A per-request client for the hosted auth API."""
    async with create_user_auth_client() as client:
        yield client


# Type aliases for route handlers
CurrentUser = Annotated[TokenUser, Depends(get_current_user)]
OptionalUser = Annotated[TokenUser | None, Depends(get_optional_user)]
SessionUser = Annotated[TokenUser, Depends(require_session)]
AuthClient = Annotated[SupabaseAuthClient, Depends(get_auth_client)]
