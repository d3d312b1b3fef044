"""Wellness entry API routes."""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_entry_service
from api.v1.schemas.entry import (
    EntryCreate,
    EntryDetailResponse,
    EntryListResponse,
    EntryResponse,
    EntryStatsResponse,
    EntryUpdate,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.entry_service import EntryService

router = APIRouter(prefix="/entries", tags=["entries"])


@router.get(
    "",
    response_model=EntryListResponse,
    summary="List entries",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_entries(
    request: Request,
    user: CurrentUser,
    service: EntryService = Depends(get_entry_service),
    start: datetime | None = Query(None, description="Logged at or after"),
    end: datetime | None = Query(None, description="Logged at or before"),
    category_id: UUID | None = Query(None, description="Filter by category"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> EntryListResponse:
    """The user's entries, newest first."""
    entries = await service.list_for_user(
        user.id,
        start=start,
        end=end,
        category_id=category_id,
        limit=limit,
        offset=offset,
    )
    return EntryListResponse(
        data=[EntryResponse.model_validate(e) for e in entries],
        limit=limit,
        offset=offset,
    )


@router.get(
    "/stats",
    response_model=EntryStatsResponse,
    summary="Aggregate entries over a date range",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_entry_stats(
    request: Request,
    user: CurrentUser,
    service: EntryService = Depends(get_entry_service),
    start: datetime | None = Query(None),
    end: datetime | None = Query(None),
) -> EntryStatsResponse:
    stats = await service.stats(user.id, start=start, end=end)
    return EntryStatsResponse(
        total_minutes=stats.total_minutes,
        total_hours=stats.total_hours,
        entry_count=stats.entry_count,
        minutes_by_category=stats.minutes_by_category,
    )


@router.post(
    "",
    response_model=EntryDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log an activity",
    responses={404: {"description": "Category not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_entry(
    request: Request,
    body: EntryCreate,
    user: CurrentUser,
    service: EntryService = Depends(get_entry_service),
) -> EntryDetailResponse:
    entry = await service.create(
        user.id,
        body.category_id,
        duration=body.duration,
        notes=body.notes,
        logged_at=body.logged_at,
    )
    return EntryDetailResponse(data=EntryResponse.model_validate(entry))


@router.get(
    "/{entry_id}",
    response_model=EntryDetailResponse,
    summary="Get an entry",
    responses={404: {"description": "Entry not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_entry(
    request: Request,
    entry_id: UUID,
    user: CurrentUser,
    service: EntryService = Depends(get_entry_service),
) -> EntryDetailResponse:
    entry = await service.get(entry_id, user.id)
    return EntryDetailResponse(data=EntryResponse.model_validate(entry))


@router.patch(
    "/{entry_id}",
    response_model=EntryDetailResponse,
    summary="Update an entry",
    responses={404: {"description": "Entry or category not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_entry(
    request: Request,
    entry_id: UUID,
    body: EntryUpdate,
    user: CurrentUser,
    service: EntryService = Depends(get_entry_service),
) -> EntryDetailResponse:
    entry = await service.update(
        entry_id,
        user.id,
        category_id=body.category_id,
        duration=body.duration,
        notes=body.notes,
        logged_at=body.logged_at,
    )
    return EntryDetailResponse(data=EntryResponse.model_validate(entry))


@router.delete(
    "/{entry_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an entry",
    responses={404: {"description": "Entry not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_entry(
    request: Request,
    entry_id: UUID,
    user: CurrentUser,
    service: EntryService = Depends(get_entry_service),
) -> None:
    await service.delete(entry_id, user.id)
    return None
