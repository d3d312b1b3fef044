"""Pydantic schemas for Entry API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class EntryCreate(BaseModel):
    """Schema for logging an activity."""

    category_id: UUID
    duration: int = Field(..., ge=1, le=1440, description="Minutes")
    notes: str | None = Field(None, max_length=1000)
    logged_at: datetime | None = None


class EntryUpdate(BaseModel):
    """Schema for updating an Entry."""

    category_id: UUID | None = None
    duration: int | None = Field(None, ge=1, le=1440)
    notes: str | None = Field(None, max_length=1000)
    logged_at: datetime | None = None


class EntryResponse(BaseModel):
    """Schema for Entry response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    category_id: UUID
    duration: int
    notes: str | None = None
    logged_at: datetime
    created_at: datetime


class EntryListResponse(BaseModel):
    data: list[EntryResponse]
    limit: int
    offset: int


class EntryDetailResponse(BaseModel):
    data: EntryResponse


class EntryStatsResponse(BaseModel):
    """Aggregates over a date range."""

    total_minutes: int
    total_hours: float
    entry_count: int
    minutes_by_category: dict[UUID, int]
