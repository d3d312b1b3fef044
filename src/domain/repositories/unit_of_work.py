"""Unit of Work protocol."""

from typing import Protocol

from domain.repositories.category_repository import ICategoryRepository
from domain.repositories.entry_repository import IEntryRepository
from domain.repositories.goal_repository import IGoalRepository
from domain.repositories.profile_repository import IProfileRepository


class IUnitOfWork(Protocol):
    """Unit of Work interface for managing transactions."""

    profiles: IProfileRepository
    categories: ICategoryRepository
    goals: IGoalRepository
    entries: IEntryRepository

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        ...

    async def __aenter__(self) -> "IUnitOfWork":
        """Enter the context manager."""
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Exit the context manager."""
        ...
