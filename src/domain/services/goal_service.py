"""Goal service layer with business logic."""

from datetime import datetime
from typing import Callable, List, Optional, Tuple
from uuid import UUID

from core.cache import CacheTTL, QueryCache, query_cache, user_tag
from core.exceptions import CategoryNotFoundError, GoalNotFoundError, ValidationError
from domain.entities.goal import MAX_GOAL_HOURS, MIN_GOAL_HOURS, CategoryGoal
from domain.repositories.unit_of_work import IUnitOfWork


class GoalService:
    """Service layer for CategoryGoal business logic.

    Each user has at most one goal per category, so writes are upserts.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        cache: QueryCache = query_cache,
    ) -> None:
        self._uow_factory = uow_factory
        self._cache = cache

    async def list_for_user(self, user_id: UUID) -> List[CategoryGoal]:
        """Get all goals the user has set."""

        async def load() -> List[CategoryGoal]:
            async with self._uow_factory() as uow:
                return await uow.goals.get_all_for_user(user_id)

        return await self._cache.get_or_load(  # type: ignore[no-any-return]
            f"goals:list:{user_id}",
            load,
            ttl=CacheTTL.MEDIUM,
            tags=[user_tag("goals", user_id)],
        )

    async def get_for_category(self, user_id: UUID, category_id: UUID) -> CategoryGoal:
        """Get the user's goal for a category."""
        async with self._uow_factory() as uow:
            goal = await uow.goals.get_for_category(user_id, category_id)
            if not goal:
                raise GoalNotFoundError(str(category_id))
            return goal

    async def upsert_goal(
        self,
        user_id: UUID,
        category_id: UUID,
        goal_hours: float,
        notes: Optional[str] = None,
    ) -> Tuple[CategoryGoal, bool]:
        """Set the weekly target hours for a category.

        Returns the stored goal and whether it was newly created.
        Last write wins.
        """
        if not MIN_GOAL_HOURS <= goal_hours <= MAX_GOAL_HOURS:
            raise ValidationError(
                f"Goal hours must be between {MIN_GOAL_HOURS:g} and {MAX_GOAL_HOURS:g}",
                field="goal_hours",
            )

        async with self._uow_factory() as uow:
            category = await uow.categories.get(category_id)
            if not category or not category.is_visible_to(user_id):
                raise CategoryNotFoundError(str(category_id))

            existing = await uow.goals.get_for_category(user_id, category_id)
            if existing:
                existing.goal_hours = goal_hours
                existing.notes = notes or None
                existing.updated_at = datetime.utcnow()
                goal = await uow.goals.update(existing)
                created = False
            else:
                goal = await uow.goals.create(
                    CategoryGoal(
                        user_id=user_id,
                        category_id=category_id,
                        goal_hours=goal_hours,
                        notes=notes or None,
                    )
                )
                created = True

            await uow.commit()

        self._invalidate(user_id)
        return goal, created

    async def delete_goal(self, user_id: UUID, category_id: UUID) -> bool:
        """Remove the user's goal for a category."""
        async with self._uow_factory() as uow:
            goal = await uow.goals.get_for_category(user_id, category_id)
            if not goal:
                raise GoalNotFoundError(str(category_id))
            deleted = await uow.goals.delete(goal.id)
            await uow.commit()

        self._invalidate(user_id)
        return deleted  # type: ignore[no-any-return]

    def _invalidate(self, user_id: UUID) -> None:
        self._cache.invalidate_many(
            [user_tag("goals", user_id), user_tag("dashboard", user_id)]
        )
