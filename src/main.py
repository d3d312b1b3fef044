"""Main FastAPI application entry point."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from api.exception_handlers import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.middleware.security import SecurityHeadersMiddleware
from api.routes.actions import router as actions_router
from api.routes.auth import router as auth_router
from api.routes.health import router as health_router
from api.routes.pages import router as pages_router
from api.v1 import router as v1_router
from core.cache import query_cache
from core.config import APP_VERSION, settings
from core.logging import setup_logging
from core.rate_limit import limiter, rate_limit_exceeded_handler
from infrastructure.auth.supabase_client import close_auth_clients
from infrastructure.database.session import dispose_engine

logger = structlog.get_logger()

# Initialize structured logging
setup_logging()

CACHE_CLEANUP_INTERVAL_SECONDS = 60


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager for startup/shutdown tasks."""
    missing = settings.missing_server_env()
    if missing:
        logger.warning("missing_server_env", variables=missing)

    async def cache_cleanup_loop() -> None:
        """Drop expired query cache entries so idle keys do not pile up."""
        while True:
            await asyncio.sleep(CACHE_CLEANUP_INTERVAL_SECONDS)
            removed = query_cache.cleanup()
            if removed:
                logger.debug("cache_cleanup_completed", removed_count=removed)

    cleanup_task = asyncio.create_task(cache_cleanup_loop())
    yield
    cleanup_task.cancel()
    await close_auth_clients()
    await dispose_engine()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        title=settings.app_name,
        description=(
            "## Wellness Tracker\n\n"
            "Log time spent on wellness categories (Faith, Life, Work, Health "
            "and your own), set weekly goals and follow your progress.\n\n"
            "### Authentication\n"
            "Sign in through `/auth/signin`. The session travels in HttpOnly "
            "cookies; API clients may send the access token instead:\n"
            "```\nAuthorization: Bearer <access_token>\n```\n\n"
            "### Rate Limits\n"
            "- GET endpoints: 30 requests/minute\n"
            "- POST/PUT/PATCH/DELETE: 10 requests/minute\n"
            "- Auth endpoints: 5 requests/minute"
        ),
        version=APP_VERSION,
        debug=settings.debug,
        openapi_tags=[
            {"name": "health", "description": "Health check endpoints"},
            {"name": "auth", "description": "Sign in, sign up and session management"},
            {"name": "profile", "description": "User profile and verification"},
            {"name": "categories", "description": "Wellness categories and insights"},
            {"name": "goals", "description": "Weekly goals per category"},
            {"name": "entries", "description": "Logged activities"},
            {"name": "progress", "description": "Dashboard progress toward goals"},
            {"name": "actions", "description": "Form actions returning ActionResult"},
            {"name": "pages", "description": "Session-guarded page view models"},
        ],
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # LIFO order: last added is outermost
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # GZip compression for responses > 1KB
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(pages_router)
    app.include_router(actions_router)
    app.include_router(v1_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )
