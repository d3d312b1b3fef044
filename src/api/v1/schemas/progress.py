"""Pydantic schemas for the dashboard progress API."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict


class CategoryProgressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    category_id: UUID
    name: str
    color: str
    icon: str | None = None
    goal_hours: float
    current_hours: float
    progress_percent: int


class ProgressTotalResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    goal_hours: float
    current_hours: float
    capacity_hours: float
    progress_percent: int
    over_capacity: bool


class ProgressResponse(BaseModel):
    """Per-category progress toward goals for a period."""

    model_config = ConfigDict(from_attributes=True)

    period: str
    categories: list[CategoryProgressResponse]
    total: ProgressTotalResponse
