"""Category API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_category_service, get_progress_service
from api.v1.schemas.category import (
    CategoryCreate,
    CategoryDetailResponse,
    CategoryInsightResponse,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdate,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.category_service import CategoryService
from domain.services.progress_service import ProgressService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get(
    "",
    response_model=CategoryListResponse,
    summary="List categories",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_categories(
    request: Request,
    user: CurrentUser,
    service: CategoryService = Depends(get_category_service),
) -> CategoryListResponse:
    """System default categories plus the user's own, in display order."""
    categories = await service.list_for_user(user.id)
    return CategoryListResponse(
        data=[CategoryResponse.model_validate(c) for c in categories]
    )


@router.post(
    "",
    response_model=CategoryDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
    responses={409: {"description": "Category with this name already exists"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_category(
    request: Request,
    body: CategoryCreate,
    user: CurrentUser,
    service: CategoryService = Depends(get_category_service),
) -> CategoryDetailResponse:
    category = await service.create(
        user_id=user.id,
        name=body.name,
        color=body.color,
        icon=body.icon,
        description=body.description,
        display_order=body.display_order,
    )
    return CategoryDetailResponse(data=CategoryResponse.model_validate(category))


@router.get(
    "/{category_id}",
    response_model=CategoryDetailResponse,
    summary="Get a category",
    responses={404: {"description": "Category not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_category(
    request: Request,
    category_id: UUID,
    user: CurrentUser,
    service: CategoryService = Depends(get_category_service),
) -> CategoryDetailResponse:
    category = await service.get(category_id, user.id)
    return CategoryDetailResponse(data=CategoryResponse.model_validate(category))


@router.patch(
    "/{category_id}",
    response_model=CategoryDetailResponse,
    summary="Update a category",
    responses={
        403: {"description": "Default categories cannot be modified"},
        404: {"description": "Category not found"},
        409: {"description": "Category with this name already exists"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_category(
    request: Request,
    category_id: UUID,
    body: CategoryUpdate,
    user: CurrentUser,
    service: CategoryService = Depends(get_category_service),
) -> CategoryDetailResponse:
    category = await service.update(
        category_id,
        user.id,
        name=body.name,
        color=body.color,
        icon=body.icon,
        description=body.description,
        display_order=body.display_order,
        is_active=body.is_active,
    )
    return CategoryDetailResponse(data=CategoryResponse.model_validate(category))


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a category",
    responses={
        403: {"description": "Default categories cannot be modified"},
        404: {"description": "Category not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_category(
    request: Request,
    category_id: UUID,
    user: CurrentUser,
    service: CategoryService = Depends(get_category_service),
) -> None:
    """Delete one of the user's categories along with its goals and entries."""
    await service.delete(category_id, user.id)
    return None


@router.get(
    "/{category_id}/insights",
    response_model=CategoryInsightResponse,
    summary="Get insights for a category",
    responses={404: {"description": "Category not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_category_insights(
    request: Request,
    category_id: UUID,
    user: CurrentUser,
    service: ProgressService = Depends(get_progress_service),
) -> CategoryInsightResponse:
    """Advice based on the latest entries of the category and its goal."""
    insight = await service.get_category_insight(user.id, category_id)
    return CategoryInsightResponse.model_validate(insight)
