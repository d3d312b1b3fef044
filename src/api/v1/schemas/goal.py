"""Pydantic schemas for Goal API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class GoalUpsert(BaseModel):
    """Schema for setting a category goal."""

    category_id: UUID
    goal_hours: float = Field(..., ge=0, le=168, description="Weekly target hours")
    notes: str | None = Field(None, max_length=500)


class GoalResponse(BaseModel):
    """Schema for Goal response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    category_id: UUID
    goal_hours: float
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class GoalListResponse(BaseModel):
    data: list[GoalResponse]


class GoalDetailResponse(BaseModel):
    data: GoalResponse
