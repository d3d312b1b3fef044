"""Page routes behind the session guard.

Each route returns the view model its page renders. Signed-out requests
are redirected to the sign-in page with ``redirect_to`` set.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query

from api.dependencies.auth import SessionUser
from api.v1.dependencies import (
    get_category_service,
    get_entry_service,
    get_goal_service,
    get_profile_service,
    get_progress_service,
)
from api.v1.schemas.category import CategoryResponse
from api.v1.schemas.entry import EntryResponse
from api.v1.schemas.goal import GoalResponse
from api.v1.schemas.profile import ProfileResponse, VerificationStatusResponse
from api.v1.schemas.progress import ProgressResponse
from domain.entities.progress import Period
from domain.services.category_service import CategoryService
from domain.services.entry_service import EntryService
from domain.services.goal_service import GoalService
from domain.services.profile_service import ProfileService
from domain.services.progress_service import ProgressService

router = APIRouter(prefix="/app", tags=["pages"])

RECENT_ENTRIES = 10


@router.get("/dashboard", summary="Dashboard page")
async def dashboard(
    user: SessionUser,
    period: Period = Query(Period.WEEKLY),
    profiles: ProfileService = Depends(get_profile_service),
    entries: EntryService = Depends(get_entry_service),
    progress: ProgressService = Depends(get_progress_service),
) -> dict[str, Any]:
    """Greeting, progress chart data and the latest activities."""
    profile = await profiles.ensure_profile(
        user.id,
        email=user.email,
        display_name=user.display_name,
        email_verified=user.email_verified,
    )
    report = await progress.get_progress(user.id, period)
    recent = await entries.list_for_user(user.id, limit=RECENT_ENTRIES)

    return {
        "profile": ProfileResponse.model_validate(profile).model_dump(mode="json"),
        "progress": ProgressResponse.model_validate(report).model_dump(mode="json"),
        "recent_entries": [
            EntryResponse.model_validate(e).model_dump(mode="json") for e in recent
        ],
    }


@router.get("/goals", summary="Goals page")
async def goals_page(
    user: SessionUser,
    categories: CategoryService = Depends(get_category_service),
    goals: GoalService = Depends(get_goal_service),
) -> dict[str, Any]:
    """Every visible category with its goal, if one is set."""
    visible = await categories.list_for_user(user.id)
    goal_by_category = {g.category_id: g for g in await goals.list_for_user(user.id)}

    rows = []
    for category in visible:
        goal = goal_by_category.get(category.id)
        rows.append(
            {
                "category": CategoryResponse.model_validate(category).model_dump(mode="json"),
                "goal": GoalResponse.model_validate(goal).model_dump(mode="json") if goal else None,
            }
        )
    return {"categories": rows}


@router.get("/settings/profile", summary="Profile settings page")
async def profile_settings(
    user: SessionUser,
    profiles: ProfileService = Depends(get_profile_service),
) -> dict[str, Any]:
    profile = await profiles.ensure_profile(
        user.id,
        email=user.email,
        display_name=user.display_name,
        email_verified=user.email_verified,
    )
    verification = await profiles.get_verification_status(user.id)
    return {
        "profile": ProfileResponse.model_validate(profile).model_dump(mode="json"),
        "verification": VerificationStatusResponse.model_validate(verification).model_dump(
            mode="json"
        ),
    }
