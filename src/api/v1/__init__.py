"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.categories import router as categories_router
from api.v1.routes.config import router as config_router
from api.v1.routes.debug import router as debug_router
from api.v1.routes.entries import router as entries_router
from api.v1.routes.goals import router as goals_router
from api.v1.routes.profile import router as profile_router
from api.v1.routes.progress import router as progress_router
from api.v1.schemas.common import ErrorResponse
from core.config import settings

router = APIRouter(
    responses={
        401: {"model": ErrorResponse, "description": "Missing or invalid access token"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    }
)
router.include_router(profile_router)
router.include_router(categories_router)
router.include_router(goals_router)
router.include_router(entries_router)
router.include_router(progress_router)
router.include_router(config_router)
if settings.debug:
    router.include_router(debug_router)
