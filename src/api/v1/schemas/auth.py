"""Pydantic schemas for the auth routes."""

from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class SignInRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    display_name: str | None = Field(None, min_length=1, max_length=100)


class PasswordResetRequest(BaseModel):
    email: EmailStr


class SessionUserResponse(BaseModel):
    id: UUID
    email: str
    display_name: str | None = None
    email_verified: bool = False


class SessionResponse(BaseModel):
    """Session state returned after sign-in, sign-up and refresh.

    Tokens travel in HttpOnly cookies; only the expiry is echoed.
    """

    authenticated: bool
    user: SessionUserResponse | None = None
    expires_at: int | None = None
    requires_confirmation: bool = False
