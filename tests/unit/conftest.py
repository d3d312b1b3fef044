"""Shared fixtures for unit tests."""

from datetime import datetime
from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from core.cache import QueryCache
from domain.entities.category import WellnessCategory


class FakeUnitOfWork:
    """Fake Unit of Work with repository mocks for unit testing."""

    def __init__(self) -> None:
        self.profiles = AsyncMock()
        self.categories = AsyncMock()
        self.goals = AsyncMock()
        self.entries = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def user_id() -> UUID:
    """A random user ID."""
    return uuid4()


@pytest.fixture
def other_user_id() -> UUID:
    """A second user, distinct from user_id."""
    return uuid4()


@pytest.fixture
def cache() -> QueryCache:
    """An isolated query cache."""
    return QueryCache()


@pytest.fixture
def system_category() -> WellnessCategory:
    return WellnessCategory(name="Work", color="#F59E0B", icon="briefcase")


@pytest.fixture
def own_category(user_id: UUID) -> WellnessCategory:
    return WellnessCategory(name="Reading", user_id=user_id, color="#22c55e")


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 18, 15, 30)
