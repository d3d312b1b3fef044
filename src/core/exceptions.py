"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    SESSION_EXPIRED = "SESSION_EXPIRED"
    SESSION_REQUIRED = "SESSION_REQUIRED"

    # Authorization errors (403)
    SYSTEM_CATEGORY = "SYSTEM_CATEGORY"

    # Not found errors (404)
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    CATEGORY_NOT_FOUND = "CATEGORY_NOT_FOUND"
    GOAL_NOT_FOUND = "GOAL_NOT_FOUND"
    ENTRY_NOT_FOUND = "ENTRY_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    SIGN_UP_FAILED = "SIGN_UP_FAILED"

    # Conflict errors (409)
    DUPLICATE_CATEGORY = "DUPLICATE_CATEGORY"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500/502)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    BACKEND_UNAVAILABLE = "BACKEND_UNAVAILABLE"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class SessionRequiredError(AppException):
    """A page route was requested without a valid session.

    Rendered as a redirect to the sign-in page rather than a JSON error.
    """

    def __init__(self, redirect_to: str = "/") -> None:
        super().__init__(
            error_code=ErrorCode.SESSION_REQUIRED,
            message="Sign in to continue",
            status_code=303,
            details={"redirect_to": redirect_to},
        )
        self.redirect_to = redirect_to


class ProfileNotFoundError(AppException):
    """Profile not found."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message=f"Profile not found: {user_id}",
            status_code=404,
            details={"user_id": user_id},
        )


class CategoryNotFoundError(AppException):
    """Category not found (or not visible to the user)."""

    def __init__(self, category_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.CATEGORY_NOT_FOUND,
            message=f"Category not found: {category_id}",
            status_code=404,
            details={"category_id": category_id},
        )


class SystemCategoryError(AppException):
    """System default categories are read-only."""

    def __init__(self, category_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.SYSTEM_CATEGORY,
            message="Default categories cannot be modified",
            status_code=403,
            details={"category_id": category_id},
        )


class DuplicateCategoryError(AppException):
    """A category with this name already exists for the user."""

    def __init__(self, name: str) -> None:
        super().__init__(
            error_code=ErrorCode.DUPLICATE_CATEGORY,
            message=f"Category '{name}' already exists",
            status_code=409,
            details={"name": name},
        )


class GoalNotFoundError(AppException):
    """Goal not found."""

    def __init__(self, category_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.GOAL_NOT_FOUND,
            message=f"No goal set for category: {category_id}",
            status_code=404,
            details={"category_id": category_id},
        )


class EntryNotFoundError(AppException):
    """Wellness entry not found."""

    def __init__(self, entry_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.ENTRY_NOT_FOUND,
            message=f"Entry not found: {entry_id}",
            status_code=404,
            details={"entry_id": entry_id},
        )


class ValidationError(AppException):
    """Input rejected by a business rule."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details={"field": field} if field else None,
        )


class BackendUnavailableError(AppException):
    """The hosted backend could not be reached or answered with a server error."""

    def __init__(self, message: str = "Authentication service unavailable") -> None:
        super().__init__(
            error_code=ErrorCode.BACKEND_UNAVAILABLE,
            message=message,
            status_code=502,
        )
