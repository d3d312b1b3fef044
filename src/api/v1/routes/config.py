"""Client configuration routes."""

from typing import Any

from fastapi import APIRouter

from core.config import settings

router = APIRouter(prefix="/config", tags=["config"])


@router.get("/public", summary="Client-safe configuration")
async def get_public_config() -> dict[str, Any]:
    """Supabase URL and anon key plus environment flags. Never secrets."""
    return settings.public_config()
