"""Database engine and session factory for the hosted Postgres."""

from typing import Any, AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import settings

POOLER_HOST = "pooler.supabase.com"


def engine_options(url: str) -> dict[str, Any]:
    """Keyword arguments for ``create_async_engine`` given a database URL."""
    if url.startswith("sqlite"):
        return {}

    options: dict[str, Any] = {"pool_pre_ping": True, "pool_size": 5, "max_overflow": 5}
    # Supavisor in transaction mode cannot hold asyncpg's prepared statements.
    if POOLER_HOST in url:
        options["connect_args"] = {"statement_cache_size": 0}
    return options


def build_engine(url: str) -> AsyncEngine:
    return create_async_engine(url, echo=False, **engine_options(url))


engine = build_engine(settings.async_database_url)

async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency yielding a session for a single request."""
    async with async_session_factory() as session:
        yield session


async def dispose_engine() -> None:
    """Close pooled connections on shutdown."""
    await engine.dispose()
