"""Common Pydantic schemas shared across the API."""

from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standardized error response."""

    error_code: str
    message: str
    details: Any | None = None


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str


class ActionResult(BaseModel):
    """Outcome of a form action. Failures never raise to the caller."""

    success: bool
    data: Any | None = None
    error: str | None = None
    message: str | None = None
    field_errors: dict[str, str] | None = None
