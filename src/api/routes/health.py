"""Health check endpoints."""

from datetime import datetime

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import APP_VERSION, settings
from core.exceptions import AppException
from infrastructure.auth.supabase_client import get_admin_auth_client
from infrastructure.database.session import get_async_session

logger = structlog.get_logger()

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str
    environment: str
    database: str | None = None
    auth: str | None = None
    missing_env: list[str] | None = None


@router.get("/health", response_model=HealthResponse, summary="Basic health check")
async def health_check() -> HealthResponse:
    """
    Basic health check for load balancers.

    Returns service status without checking dependencies.
    """
    return HealthResponse(
        status="healthy",
        version=APP_VERSION,
        timestamp=datetime.utcnow().isoformat(),
        environment=settings.app_env,
    )


@router.get(
    "/health/detailed",
    response_model=HealthResponse,
    summary="Detailed health check",
)
async def detailed_health_check(
    db: AsyncSession = Depends(get_async_session),
) -> HealthResponse:
    """
    Database connectivity plus any missing server configuration.

    Reports ``degraded`` rather than failing so dashboards can show why.
    """
    try:
        await db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError as e:
        logger.warning("health_database_unreachable", error=str(e))
        db_status = f"unhealthy: {type(e).__name__}"

    auth_status = await _auth_status()
    missing = settings.missing_server_env()
    healthy = db_status == "healthy" and auth_status in ("healthy", "not configured")
    overall_status = "healthy" if healthy and not missing else "degraded"

    return HealthResponse(
        status=overall_status,
        version=APP_VERSION,
        timestamp=datetime.utcnow().isoformat(),
        environment=settings.app_env,
        database=db_status,
        auth=auth_status,
        missing_env=missing,
    )


async def _auth_status() -> str:
    if not settings.supabase_auth_url:
        return "not configured"
    try:
        await get_admin_auth_client().check_health()
    except AppException as e:
        logger.warning("health_auth_unreachable", error=e.message)
        return f"unhealthy: {e.error_code.value}"
    return "healthy"
