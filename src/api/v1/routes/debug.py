"""Debug routes, mounted only when debug mode is on."""

from typing import Any

from fastapi import APIRouter, status

from api.dependencies.auth import CurrentUser
from core.cache import query_cache

router = APIRouter(prefix="/debug", tags=["debug"])


@router.get("/cache", summary="Query cache statistics")
async def get_cache_stats(user: CurrentUser) -> dict[str, Any]:
    stats = query_cache.stats()
    return {
        "entries": stats.entries,
        "hits": stats.hits,
        "misses": stats.misses,
        "writes": stats.writes,
        "evictions": stats.evictions,
        "expirations": stats.expirations,
        "invalidations": stats.invalidations,
        "hit_rate": round(stats.hit_rate, 3),
        "tags": stats.tags,
    }


@router.delete("/cache", status_code=status.HTTP_204_NO_CONTENT, summary="Clear the query cache")
async def clear_cache(user: CurrentUser) -> None:
    query_cache.clear()
    return None
