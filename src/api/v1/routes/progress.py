"""Dashboard progress API routes."""

from fastapi import APIRouter, Depends, Query, Request

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_progress_service
from api.v1.schemas.progress import ProgressResponse
from core.rate_limit import READ_LIMIT, limiter
from domain.entities.progress import Period
from domain.services.progress_service import ProgressService

router = APIRouter(prefix="/progress", tags=["progress"])


@router.get(
    "",
    response_model=ProgressResponse,
    summary="Progress toward goals for a period",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_progress(
    request: Request,
    user: CurrentUser,
    service: ProgressService = Depends(get_progress_service),
    period: Period = Query(Period.WEEKLY),
) -> ProgressResponse:
    """
    Hours logged per category against the goal scaled to the period.

    The total is measured against the 7 hours/day allocation cap.
    """
    report = await service.get_progress(user.id, period)
    return ProgressResponse.model_validate(report)
