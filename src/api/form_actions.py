"""Form action runner.

A form action performs one service call and never raises to the caller:
application, validation and database errors are logged here and returned
as ``ActionResult(success=False, ...)`` for the form to display.
"""

from typing import Any, Awaitable, Callable, Optional

import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from api.v1.schemas.common import ActionResult
from core.exceptions import AppException

logger = structlog.get_logger()

GENERIC_FAILURE = "Something went wrong, please try again"


def _field_errors(exc: PydanticValidationError) -> dict[str, str]:
    errors: dict[str, str] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "__root__"
        errors.setdefault(field, error["msg"])
    return errors


def _to_data(result: Any) -> Any:
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json")
    if isinstance(result, list):
        return [_to_data(item) for item in result]
    return result


async def run_action(
    name: str,
    operation: Callable[[], Awaitable[Any]],
    success_message: Optional[str] = None,
) -> ActionResult:
    """Await ``operation`` and map its outcome to an ActionResult."""
    try:
        result = await operation()
    except PydanticValidationError as exc:
        logger.info("action_invalid", action=name, errors=exc.error_count())
        return ActionResult(
            success=False,
            error="Please correct the highlighted fields",
            field_errors=_field_errors(exc),
        )
    except AppException as exc:
        logger.warning(
            "action_failed",
            action=name,
            error_code=exc.error_code.value,
            message=exc.message,
        )
        field = exc.details.get("field") if isinstance(exc.details, dict) else None
        return ActionResult(
            success=False,
            error=exc.message,
            field_errors={field: exc.message} if field else None,
        )
    except SQLAlchemyError as exc:
        logger.error("action_database_error", action=name, error_type=type(exc).__name__, exc_info=True)
        return ActionResult(success=False, error=GENERIC_FAILURE)

    return ActionResult(success=True, data=_to_data(result), message=success_message)
