"""Pydantic schemas for Profile API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ProfileUpdate(BaseModel):
    """Settings form fields. Omitted fields are left unchanged."""

    display_name: str | None = Field(None, min_length=1, max_length=100)
    avatar_url: str | None = Field(None, max_length=500)
    phone: str | None = Field(None, max_length=32, pattern=r"^(\+?[0-9 ()-]{7,32})?$")


class ProfileResponse(BaseModel):
    """Schema for Profile response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    display_name: str | None = None
    avatar_url: str | None = None
    phone: str | None = None
    email_verified: bool
    phone_verified: bool
    created_at: datetime
    updated_at: datetime


class ProfileDetailResponse(BaseModel):
    data: ProfileResponse


class VerificationStatusResponse(BaseModel):
    """Schema for verification flags."""

    model_config = ConfigDict(from_attributes=True)

    email: str
    email_verified: bool
    phone: str | None = None
    phone_verified: bool
    fully_verified: bool
