"""Goal API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_goal_service
from api.v1.schemas.goal import GoalDetailResponse, GoalListResponse, GoalResponse, GoalUpsert
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.goal_service import GoalService

router = APIRouter(prefix="/goals", tags=["goals"])


@router.get(
    "",
    response_model=GoalListResponse,
    summary="List goals",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_goals(
    request: Request,
    user: CurrentUser,
    service: GoalService = Depends(get_goal_service),
) -> GoalListResponse:
    goals = await service.list_for_user(user.id)
    return GoalListResponse(data=[GoalResponse.model_validate(g) for g in goals])


@router.put(
    "",
    response_model=GoalDetailResponse,
    summary="Set the weekly goal for a category",
    responses={
        200: {"description": "Goal updated"},
        201: {"description": "Goal created"},
        404: {"description": "Category not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def upsert_goal(
    request: Request,
    response: Response,
    body: GoalUpsert,
    user: CurrentUser,
    service: GoalService = Depends(get_goal_service),
) -> GoalDetailResponse:
    """Create the category's goal or replace its target hours."""
    goal, created = await service.upsert_goal(
        user.id,
        body.category_id,
        goal_hours=body.goal_hours,
        notes=body.notes,
    )
    if created:
        response.status_code = status.HTTP_201_CREATED
    return GoalDetailResponse(data=GoalResponse.model_validate(goal))


@router.get(
    "/{category_id}",
    response_model=GoalDetailResponse,
    summary="Get the goal for a category",
    responses={404: {"description": "No goal set"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_goal(
    request: Request,
    category_id: UUID,
    user: CurrentUser,
    service: GoalService = Depends(get_goal_service),
) -> GoalDetailResponse:
    goal = await service.get_for_category(user.id, category_id)
    return GoalDetailResponse(data=GoalResponse.model_validate(goal))


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove the goal for a category",
    responses={404: {"description": "No goal set"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_goal(
    request: Request,
    category_id: UUID,
    user: CurrentUser,
    service: GoalService = Depends(get_goal_service),
) -> None:
    await service.delete_goal(user.id, category_id)
    return None
