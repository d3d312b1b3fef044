"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator, Callable
from datetime import datetime
from pathlib import Path
from typing import Any
from uuid import UUID, uuid4

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.cache import QueryCache
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.auth.supabase_client import SupabaseAuthClient
from infrastructure.database.models import Base, CategoryModel, ProfileModel

# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_USER_ID = UUID("5f0c7a8e-3b1d-4c2e-9a6f-1d2e3f4a5b6c")

SYSTEM_CATEGORIES = [
    ("Faith", "#6366F1", "sparkles"),
    ("Life", "#10B981", "users"),
    ("Work", "#F59E0B", "briefcase"),
    ("Health", "#F43F5E", "activity"),
]


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """A fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory with the system categories seeded."""
    factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with factory() as session:
        now = datetime.utcnow()
        for order, (name, color, icon) in enumerate(SYSTEM_CATEGORIES):
            session.add(
                CategoryModel(
                    id=uuid4(),
                    user_id=None,
                    name=name,
                    color=color,
                    icon=icon,
                    display_order=order,
                    created_at=now,
                    updated_at=now,
                )
            )
        await session.commit()
    return factory


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """A database session for direct assertions."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def test_user() -> TokenUser:
    """Create a test user with fixed ID."""
    return TokenUser(
        id=TEST_USER_ID,
        email="test@example.com",
        display_name="Test User",
        email_verified=True,
    )


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def auth_token(auth_provider: JWTAuthProvider, test_user: TokenUser) -> str:
    """Create auth token for test user."""
    return str(auth_provider.create_token(test_user))


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def cache() -> QueryCache:
    """An isolated query cache."""
    return QueryCache()


AuthHandler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def auth_api() -> dict[str, Any]:
    """Programmable stand-in for the hosted auth API.

    Tests put a handler under ``"handler"``; requests are recorded under
    ``"requests"``.
    """
    state: dict[str, Any] = {"requests": [], "handler": None}
    return state


def make_auth_client(auth_api: dict[str, Any]) -> SupabaseAuthClient:
    def dispatch(request: httpx.Request) -> httpx.Response:
        auth_api["requests"].append(request)
        handler = auth_api["handler"]
        if handler is None:
            return httpx.Response(500, json={"msg": "no handler"})
        return handler(request)  # type: ignore[no-any-return]

    return SupabaseAuthClient(
        "http://auth.test/auth/v1",
        "anon-key",
        transport=httpx.MockTransport(dispatch),
    )


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth, no overrides)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def app_client(
    session_factory: async_sessionmaker[AsyncSession],
    auth_provider: JWTAuthProvider,
    cache: QueryCache,
    auth_api: dict[str, Any],
) -> AsyncGenerator[AsyncClient, None]:
    """
    Test client wired to the in-memory database, an isolated cache, the
    test token provider and the fake auth API. No user is signed in.
    """
    from api.dependencies.auth import get_auth_client, get_auth_provider
    from api.v1.dependencies import (
        get_category_service,
        get_entry_service,
        get_goal_service,
        get_profile_service,
        get_progress_service,
    )
    from domain.services.category_service import CategoryService
    from domain.services.entry_service import EntryService
    from domain.services.goal_service import GoalService
    from domain.services.profile_service import ProfileService
    from domain.services.progress_service import ProgressService
    from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
    from main import create_app

    app = create_app()

    def test_uow_factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    async def override_get_auth_client() -> AsyncGenerator[SupabaseAuthClient, None]:
        async with make_auth_client(auth_api) as auth_client:
            yield auth_client

    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[get_auth_client] = override_get_auth_client
    app.dependency_overrides[get_profile_service] = lambda: ProfileService(test_uow_factory, cache)
    app.dependency_overrides[get_category_service] = lambda: CategoryService(test_uow_factory, cache)
    app.dependency_overrides[get_goal_service] = lambda: GoalService(test_uow_factory, cache)
    app.dependency_overrides[get_entry_service] = lambda: EntryService(test_uow_factory, cache)
    app.dependency_overrides[get_progress_service] = lambda: ProgressService(test_uow_factory, cache)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
async def authenticated_client(
    app_client: AsyncClient,
    session_factory: async_sessionmaker[AsyncSession],
    test_user: TokenUser,
    auth_headers: dict[str, str],
) -> AsyncClient:
    """``app_client`` with the test user's profile stored and a bearer token set."""
    async with session_factory() as session:
        session.add(
            ProfileModel(
                id=test_user.id,
                email=test_user.email,
                display_name=test_user.display_name,
                email_verified=True,
            )
        )
        await session.commit()

    app_client.headers.update(auth_headers)
    return app_client


def auth_session_payload(
    access_token: str, user: TokenUser, refresh_token: str = "refresh-1"
) -> dict[str, Any]:
    """A session body as the hosted auth API returns it."""
    return {
        "access_token": access_token,
        "refresh_token": refresh_token,
        "token_type": "bearer",
        "expires_in": 3600,
        "expires_at": 1_900_000_000,
        "user": {
            "id": str(user.id),
            "email": user.email,
            "email_confirmed_at": "2026-01-01T00:00:00Z",
            "user_metadata": {"display_name": user.display_name},
        },
    }
