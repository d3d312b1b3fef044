"""Pydantic schemas for Category API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

HEX_COLOR = r"^#?[0-9A-Fa-f]{6}$"


def _clean_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Name cannot be blank")
    return v


class CategoryCreate(BaseModel):
    """Schema for creating a Category."""

    name: str = Field(..., min_length=1, max_length=50)
    color: str = Field("#3B82F6", pattern=HEX_COLOR)
    icon: str | None = Field(None, max_length=50)
    description: str | None = Field(None, max_length=500)
    display_order: int = Field(0, ge=0)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _clean_name(v)


class CategoryUpdate(BaseModel):
    """Schema for updating a Category."""

    name: str | None = Field(None, min_length=1, max_length=50)
    color: str | None = Field(None, pattern=HEX_COLOR)
    icon: str | None = Field(None, max_length=50)
    description: str | None = Field(None, max_length=500)
    display_order: int | None = Field(None, ge=0)
    is_active: bool | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return None if v is None else _clean_name(v)


class CategoryResponse(BaseModel):
    """Schema for Category response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "456e4567-e89b-12d3-a456-426614174000",
                "name": "Work",
                "color": "#EF4444",
                "icon": "briefcase",
                "is_system_default": True,
            }
        },
    )

    id: UUID
    name: str
    color: str
    icon: str | None = None
    description: str | None = None
    display_order: int
    is_active: bool
    is_system_default: bool
    created_at: datetime
    updated_at: datetime


class CategoryListResponse(BaseModel):
    data: list[CategoryResponse]


class CategoryDetailResponse(BaseModel):
    data: CategoryResponse


class CategoryInsightResponse(BaseModel):
    """Advice for one category."""

    model_config = ConfigDict(from_attributes=True)

    category_id: UUID
    category_name: str
    insight: str
    recommendations: list[str]
    entry_count: int
    average_minutes: float | None = None
    days_since_last_entry: int | None = None
