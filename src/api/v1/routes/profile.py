"""Profile API routes."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_profile_service
from api.v1.schemas.profile import (
    ProfileDetailResponse,
    ProfileResponse,
    ProfileUpdate,
    VerificationStatusResponse,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.profile_service import ProfileService

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get(
    "",
    response_model=ProfileDetailResponse,
    summary="Get the current user's profile",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_profile(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Get the profile, creating it on first access."""
    profile = await service.ensure_profile(
        user.id,
        email=user.email,
        display_name=user.display_name,
        email_verified=user.email_verified,
    )
    return ProfileDetailResponse(data=ProfileResponse.model_validate(profile))


@router.patch(
    "",
    response_model=ProfileDetailResponse,
    summary="Update the current user's profile",
    responses={404: {"description": "Profile not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_profile(
    request: Request,
    body: ProfileUpdate,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Change display name, avatar URL or phone number."""
    profile = await service.update_profile(
        user.id,
        display_name=body.display_name,
        avatar_url=body.avatar_url,
        phone=body.phone,
    )
    return ProfileDetailResponse(data=ProfileResponse.model_validate(profile))


@router.get(
    "/verification",
    response_model=VerificationStatusResponse,
    summary="Get email and phone verification status",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_verification_status(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> VerificationStatusResponse:
    status = await service.get_verification_status(user.id)
    return VerificationStatusResponse.model_validate(status)
