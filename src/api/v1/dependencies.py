"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from domain.services.category_service import CategoryService
from domain.services.entry_service import EntryService
from domain.services.goal_service import GoalService
from domain.services.profile_service import ProfileService
from domain.services.progress_service import ProgressService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_profile_service() -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(get_uow_factory())


@lru_cache
def get_category_service() -> CategoryService:
    """Get Category service instance."""
    return CategoryService(get_uow_factory())


@lru_cache
def get_goal_service() -> GoalService:
    """Get Goal service instance."""
    return GoalService(get_uow_factory())


@lru_cache
def get_entry_service() -> EntryService:
    """Get Entry service instance."""
    return EntryService(get_uow_factory())


@lru_cache
def get_progress_service() -> ProgressService:
    """Get Progress service instance."""
    return ProgressService(get_uow_factory())
