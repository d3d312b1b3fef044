"""Client for the Supabase hosted auth (GoTrue) REST API.

One admin client (service role key) is shared by the process; user-facing
calls get a short-lived client built with the anon key.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Optional
from uuid import UUID

import httpx

from core.config import settings
from core.exceptions import AuthenticationError, BackendUnavailableError, ErrorCode

logger = logging.getLogger(__name__)


@dataclass
class AuthUser:
    """User record returned by the auth API."""

    id: UUID
    email: str
    email_verified: bool = False
    display_name: Optional[str] = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "AuthUser":
        metadata = data.get("user_metadata") or {}
        return cls(
            id=UUID(data["id"]),
            email=data.get("email") or "",
            email_verified=bool(data.get("email_confirmed_at") or data.get("confirmed_at")),
            display_name=metadata.get("display_name") or metadata.get("full_name"),
        )


@dataclass
class AuthSession:
    """Access/refresh token pair for a signed-in user."""

    access_token: str
    refresh_token: str
    expires_in: int
    expires_at: int
    user: AuthUser

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "AuthSession":
        expires_in = int(data.get("expires_in") or 3600)
        return cls(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token") or "",
            expires_in=expires_in,
            expires_at=int(data.get("expires_at") or time.time() + expires_in),
            user=AuthUser.from_payload(data["user"]),
        )


@dataclass
class SignUpResult:
    """A new account. ``session`` is None until the email is confirmed."""

    user: AuthUser
    session: Optional[AuthSession] = None


class SupabaseAuthClient:
    """Thin async wrapper over ``{SUPABASE_URL}/auth/v1``."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
        )

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "SupabaseAuthClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def sign_in(self, email: str, password: str) -> AuthSession:
        """Password sign-in."""
        data = await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
            error_code=ErrorCode.INVALID_CREDENTIALS,
        )
        return AuthSession.from_payload(data)

    async def sign_up(
        self,
        email: str,
        password: str,
        display_name: Optional[str] = None,
        redirect_to: Optional[str] = None,
    ) -> SignUpResult:
        """Register a new account; confirmation email redirects to ``redirect_to``."""
        params = {"redirect_to": redirect_to} if redirect_to else None
        data = await self._request(
            "POST",
            "/signup",
            params=params,
            json={
                "email": email,
                "password": password,
                "data": {"display_name": display_name} if display_name else {},
            },
            error_code=ErrorCode.SIGN_UP_FAILED,
        )
        if data.get("access_token"):
            session = AuthSession.from_payload(data)
            return SignUpResult(user=session.user, session=session)
        # Email confirmation pending: the body is the bare user.
        return SignUpResult(user=AuthUser.from_payload(data.get("user") or data))

    async def sign_out(self, access_token: str) -> None:
        """Revoke the refresh tokens of the session behind ``access_token``."""
        await self._request(
            "POST",
            "/logout",
            headers={"Authorization": f"Bearer {access_token}"},
            error_code=ErrorCode.UNAUTHORIZED,
        )

    async def refresh_session(self, refresh_token: str) -> AuthSession:
        """Exchange a refresh token for a new session."""
        data = await self._request(
            "POST",
            "/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
            error_code=ErrorCode.SESSION_EXPIRED,
        )
        return AuthSession.from_payload(data)

    async def request_password_reset(self, email: str, redirect_to: Optional[str] = None) -> None:
        """Send the password recovery email."""
        params = {"redirect_to": redirect_to} if redirect_to else None
        await self._request(
            "POST",
            "/recover",
            params=params,
            json={"email": email},
            error_code=ErrorCode.VALIDATION_ERROR,
        )

    async def check_health(self) -> None:
        """Raise BackendUnavailableError unless the auth API answers its health probe."""
        await self._request("GET", "/health", error_code=ErrorCode.BACKEND_UNAVAILABLE)

    async def get_user(self, access_token: str) -> AuthUser:
        """Look up the user that owns ``access_token``."""
        data = await self._request(
            "GET",
            "/user",
            headers={"Authorization": f"Bearer {access_token}"},
            error_code=ErrorCode.INVALID_TOKEN,
        )
        return AuthUser.from_payload(data)

    async def _request(
        self,
        method: str,
        path: str,
        error_code: ErrorCode,
        params: Optional[dict[str, str]] = None,
        json: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> dict[str, Any]:
        try:
            response = await self._client.request(
                method, path, params=params, json=json, headers=headers
            )
        except httpx.TransportError as exc:
            logger.warning("Auth API %s %s failed: %s", method, path, exc)
            raise BackendUnavailableError() from exc

        if response.status_code >= 500:
            logger.warning("Auth API %s %s returned %d", method, path, response.status_code)
            raise BackendUnavailableError()
        if response.status_code >= 400:
            raise AuthenticationError(_error_message(response), error_code=error_code)

        if not response.content:
            return {}
        return response.json()  # type: ignore[no-any-return]


def _error_message(response: httpx.Response) -> str:
    """GoTrue has used several error body shapes over time."""
    try:
        body = response.json()
    except ValueError:
        return response.text or "Authentication failed"
    return str(
        body.get("error_description")
        or body.get("msg")
        or body.get("message")
        or body.get("error")
        or "Authentication failed"
    )


# Process-wide clients keyed by role. A second admin client would hold a
# second connection pool for the same credentials.
_registry: dict[str, SupabaseAuthClient] = {}


def get_admin_auth_client() -> SupabaseAuthClient:
    """The shared service-role client. Server-side only."""
    client = _registry.get("admin")
    if client is None or client.is_closed:
        client = SupabaseAuthClient(
            settings.supabase_auth_url,
            settings.supabase_service_role_key,
            timeout=settings.supabase_timeout_seconds,
        )
        _registry["admin"] = client
        logger.info("Created admin auth client")
    return client


def create_user_auth_client(
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> SupabaseAuthClient:
    """A fresh anon-key client for one request. Caller closes it."""
    return SupabaseAuthClient(
        settings.supabase_auth_url,
        settings.supabase_anon_key,
        timeout=settings.supabase_timeout_seconds,
        transport=transport,
    )


async def close_auth_clients() -> None:
    while _registry:
        _, client = _registry.popitem()
        await client.aclose()
