"""Form action endpoints.

Each endpoint accepts the raw form payload, validates it and performs a
single service call. The response is always 200 with an ActionResult;
only a missing session is reported as an HTTP error.
"""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Request

from api.dependencies.auth import CurrentUser
from api.form_actions import run_action
from api.v1.dependencies import (
    get_category_service,
    get_entry_service,
    get_goal_service,
    get_profile_service,
)
from api.v1.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from api.v1.schemas.common import ActionResult
from api.v1.schemas.entry import EntryCreate, EntryResponse, EntryUpdate
from api.v1.schemas.goal import GoalResponse, GoalUpsert
from api.v1.schemas.profile import ProfileResponse, ProfileUpdate
from core.rate_limit import WRITE_LIMIT, limiter
from domain.services.category_service import CategoryService
from domain.services.entry_service import EntryService
from domain.services.goal_service import GoalService
from domain.services.profile_service import ProfileService

router = APIRouter(prefix="/actions", tags=["actions"])

FormData = dict[str, Any]


@router.post("/entries", response_model=ActionResult, summary="Log an activity")
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_entry_action(
    request: Request,
    user: CurrentUser,
    form: FormData = Body(default_factory=dict),
    service: EntryService = Depends(get_entry_service),
) -> ActionResult:
    async def operation() -> EntryResponse:
        body = EntryCreate.model_validate(form)
        entry = await service.create(
            user.id,
            body.category_id,
            duration=body.duration,
            notes=body.notes,
            logged_at=body.logged_at,
        )
        return EntryResponse.model_validate(entry)

    return await run_action("create_entry", operation, "Activity logged")


@router.patch("/entries/{entry_id}", response_model=ActionResult, summary="Edit an activity")
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_entry_action(
    request: Request,
    entry_id: UUID,
    user: CurrentUser,
    form: FormData = Body(default_factory=dict),
    service: EntryService = Depends(get_entry_service),
) -> ActionResult:
    async def operation() -> EntryResponse:
        body = EntryUpdate.model_validate(form)
        entry = await service.update(
            entry_id,
            user.id,
            category_id=body.category_id,
            duration=body.duration,
            notes=body.notes,
            logged_at=body.logged_at,
        )
        return EntryResponse.model_validate(entry)

    return await run_action("update_entry", operation, "Activity updated")


@router.delete("/entries/{entry_id}", response_model=ActionResult, summary="Delete an activity")
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_entry_action(
    request: Request,
    entry_id: UUID,
    user: CurrentUser,
    service: EntryService = Depends(get_entry_service),
) -> ActionResult:
    async def operation() -> None:
        await service.delete(entry_id, user.id)

    return await run_action("delete_entry", operation, "Activity deleted")


@router.post("/goals", response_model=ActionResult, summary="Save a category goal")
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def upsert_goal_action(
    request: Request,
    user: CurrentUser,
    form: FormData = Body(default_factory=dict),
    service: GoalService = Depends(get_goal_service),
) -> ActionResult:
    async def operation() -> GoalResponse:
        body = GoalUpsert.model_validate(form)
        goal, _ = await service.upsert_goal(
            user.id, body.category_id, goal_hours=body.goal_hours, notes=body.notes
        )
        return GoalResponse.model_validate(goal)

    return await run_action("upsert_goal", operation, "Goal saved")


@router.delete("/goals/{category_id}", response_model=ActionResult, summary="Remove a category goal")
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_goal_action(
    request: Request,
    category_id: UUID,
    user: CurrentUser,
    service: GoalService = Depends(get_goal_service),
) -> ActionResult:
    async def operation() -> None:
        await service.delete_goal(user.id, category_id)

    return await run_action("delete_goal", operation, "Goal removed")


@router.post("/categories", response_model=ActionResult, summary="Create a category")
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_category_action(
    request: Request,
    user: CurrentUser,
    form: FormData = Body(default_factory=dict),
    service: CategoryService = Depends(get_category_service),
) -> ActionResult:
    async def operation() -> CategoryResponse:
        body = CategoryCreate.model_validate(form)
        category = await service.create(
            user_id=user.id,
            name=body.name,
            color=body.color,
            icon=body.icon,
            description=body.description,
            display_order=body.display_order,
        )
        return CategoryResponse.model_validate(category)

    return await run_action("create_category", operation, "Category created")


@router.patch("/categories/{category_id}", response_model=ActionResult, summary="Edit a category")
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_category_action(
    request: Request,
    category_id: UUID,
    user: CurrentUser,
    form: FormData = Body(default_factory=dict),
    service: CategoryService = Depends(get_category_service),
) -> ActionResult:
    async def operation() -> CategoryResponse:
        body = CategoryUpdate.model_validate(form)
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
        return CategoryResponse.model_validate(category)

    return await run_action("update_category", operation, "Category updated")


@router.delete("/categories/{category_id}", response_model=ActionResult, summary="Delete a category")
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_category_action(
    request: Request,
    category_id: UUID,
    user: CurrentUser,
    service: CategoryService = Depends(get_category_service),
) -> ActionResult:
    async def operation() -> None:
        await service.delete(category_id, user.id)

    return await run_action("delete_category", operation, "Category deleted")


@router.post("/profile", response_model=ActionResult, summary="Save profile settings")
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_profile_action(
    request: Request,
    user: CurrentUser,
    form: FormData = Body(default_factory=dict),
    service: ProfileService = Depends(get_profile_service),
) -> ActionResult:
    async def operation() -> ProfileResponse:
        body = ProfileUpdate.model_validate(form)
        profile = await service.update_profile(
            user.id,
            display_name=body.display_name,
            avatar_url=body.avatar_url,
            phone=body.phone,
        )
        return ProfileResponse.model_validate(profile)

    return await run_action("update_profile", operation, "Profile updated")
