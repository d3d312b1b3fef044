"""Session routes backed by the hosted auth API.

Tokens are handed to the browser as HttpOnly cookies; the JSON body only
describes the session.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from api.dependencies.auth import AccessToken, AuthClient, CurrentUser, OptionalUser
from api.v1.dependencies import get_profile_service
from api.v1.schemas.auth import (
    PasswordResetRequest,
    SessionResponse,
    SessionUserResponse,
    SignInRequest,
    SignUpRequest,
)
from api.v1.schemas.common import MessageResponse
from core.config import settings
from core.exceptions import AppException, AuthenticationError, ErrorCode
from core.rate_limit import AUTH_LIMIT, limiter
from domain.services.profile_service import ProfileService
from infrastructure.auth.supabase_client import AuthSession, AuthUser

logger = structlog.get_logger()

router = APIRouter(prefix="/auth", tags=["auth"])


def set_session_cookies(response: Response, session: AuthSession) -> None:
    response.set_cookie(
        settings.access_cookie_name,
        session.access_token,
        max_age=session.expires_in,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        path="/",
    )
    response.set_cookie(
        settings.refresh_cookie_name,
        session.refresh_token,
        max_age=settings.refresh_cookie_max_age,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        path="/",
    )


def clear_session_cookies(response: Response) -> None:
    for name in (settings.access_cookie_name, settings.refresh_cookie_name):
        response.delete_cookie(
            name,
            path="/",
            httponly=True,
            secure=settings.cookie_secure,
            samesite="lax",
        )


def _session_response(session: AuthSession) -> SessionResponse:
    return SessionResponse(
        authenticated=True,
        user=_user_response(session.user),
        expires_at=session.expires_at,
    )


def _user_response(user: AuthUser) -> SessionUserResponse:
    return SessionUserResponse(
        id=user.id,
        email=user.email,
        display_name=user.display_name,
        email_verified=user.email_verified,
    )


@router.post("/signin", response_model=SessionResponse, summary="Sign in with email and password")
@limiter.limit(AUTH_LIMIT)  # type: ignore[untyped-decorator]
async def sign_in(
    request: Request,
    response: Response,
    body: SignInRequest,
    auth: AuthClient,
    profiles: ProfileService = Depends(get_profile_service),
) -> SessionResponse:
    """Start a session and make sure the user's profile exists."""
    session = await auth.sign_in(body.email, body.password)
    await profiles.ensure_profile(
        session.user.id,
        email=session.user.email,
        display_name=session.user.display_name,
        email_verified=session.user.email_verified,
    )
    set_session_cookies(response, session)
    logger.info("signed_in", user_id=str(session.user.id))
    return _session_response(session)


@router.post(
    "/signup",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
)
@limiter.limit(AUTH_LIMIT)  # type: ignore[untyped-decorator]
async def sign_up(
    request: Request,
    response: Response,
    body: SignUpRequest,
    auth: AuthClient,
    profiles: ProfileService = Depends(get_profile_service),
) -> SessionResponse:
    """Register. Until the email is confirmed there is no session."""
    result = await auth.sign_up(
        body.email,
        body.password,
        display_name=body.display_name,
        redirect_to=f"{settings.site_url.rstrip('/')}/app/dashboard",
    )
    logger.info("signed_up", user_id=str(result.user.id), confirmed=result.session is not None)

    if result.session is None:
        return SessionResponse(
            authenticated=False,
            user=_user_response(result.user),
            requires_confirmation=True,
        )

    await profiles.ensure_profile(
        result.user.id,
        email=result.user.email,
        display_name=body.display_name,
        email_verified=result.user.email_verified,
    )
    set_session_cookies(response, result.session)
    return _session_response(result.session)


@router.post("/signout", response_model=MessageResponse, summary="Sign out")
async def sign_out(
    request: Request,
    response: Response,
    token: AccessToken,
    auth: AuthClient,
) -> MessageResponse:
    """Revoke the session remotely if possible; the cookies are always cleared."""
    if token:
        try:
            await auth.sign_out(token)
        except AppException as exc:
            logger.warning("sign_out_failed", error_code=exc.error_code.value, message=exc.message)
    clear_session_cookies(response)
    return MessageResponse(message="Signed out")


@router.post("/refresh", response_model=SessionResponse, summary="Refresh the session")
@limiter.limit(AUTH_LIMIT)  # type: ignore[untyped-decorator]
async def refresh(request: Request, response: Response, auth: AuthClient) -> Any:
    """Exchange the refresh cookie for new tokens. Exactly one attempt."""
    refresh_token = request.cookies.get(settings.refresh_cookie_name)
    if not refresh_token:
        raise AuthenticationError("No session to refresh", error_code=ErrorCode.SESSION_EXPIRED)

    try:
        session = await auth.refresh_session(refresh_token)
    except AuthenticationError as exc:
        logger.info("session_refresh_failed", message=exc.message)
        # Raising would drop the cookie deletions set on ``response``.
        failed = JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={
                "error_code": ErrorCode.SESSION_EXPIRED.value,
                "message": "Your session has expired, please sign in again",
                "details": None,
            },
        )
        clear_session_cookies(failed)
        return failed

    set_session_cookies(response, session)
    return _session_response(session)


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    summary="Send a password reset email",
)
@limiter.limit(AUTH_LIMIT)  # type: ignore[untyped-decorator]
async def reset_password(
    request: Request,
    body: PasswordResetRequest,
    auth: AuthClient,
) -> MessageResponse:
    await auth.request_password_reset(
        body.email,
        redirect_to=f"{settings.site_url.rstrip('/')}/app/settings/profile",
    )
    return MessageResponse(message="If the account exists, a reset link has been sent")


@router.get("/session", response_model=SessionResponse, summary="Current session state")
async def get_session(user: OptionalUser) -> SessionResponse:
    if user is None:
        return SessionResponse(authenticated=False)
    return SessionResponse(
        authenticated=True,
        user=SessionUserResponse(
            id=user.id,
            email=user.email,
            display_name=user.display_name,
            email_verified=user.email_verified,
        ),
    )


@router.post(
    "/session/sync",
    response_model=SessionResponse,
    summary="Reload the signed-in user from the auth API",
)
@limiter.limit(AUTH_LIMIT)  # type: ignore[untyped-decorator]
async def sync_session(
    request: Request,
    user: CurrentUser,
    token: AccessToken,
    auth: AuthClient,
    profiles: ProfileService = Depends(get_profile_service),
) -> SessionResponse:
    """Pick up a newly confirmed email without signing in again.

    The access token's claims are fixed at issue time, so the hosted user
    record is the source of truth for ``email_verified``.
    """
    auth_user = await auth.get_user(token or "")
    await profiles.ensure_profile(
        auth_user.id,
        email=auth_user.email,
        display_name=auth_user.display_name,
        email_verified=auth_user.email_verified,
    )
    logger.info("session_synced", user_id=str(user.id), email_verified=auth_user.email_verified)
    return SessionResponse(authenticated=True, user=_user_response(auth_user))
