"""SQLAlchemy implementation of Goal repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.goal import CategoryGoal
from infrastructure.database.models import GoalModel


class SQLAlchemyGoalRepository:
    """SQLAlchemy implementation of IGoalRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_all_for_user(self, user_id: UUID) -> list[CategoryGoal]:
        """Get every goal the user has set."""
        stmt = select(GoalModel).where(GoalModel.user_id == user_id).order_by(GoalModel.created_at)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_for_category(self, user_id: UUID, category_id: UUID) -> CategoryGoal | None:
        """Get the user's goal for one category."""
        stmt = select(GoalModel).where(
            GoalModel.user_id == user_id,
            GoalModel.category_id == category_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, goal: CategoryGoal) -> CategoryGoal:
        """Create a new goal."""
        model = GoalModel(
            id=goal.id,
            user_id=goal.user_id,
            category_id=goal.category_id,
            goal_hours=goal.goal_hours,
            notes=goal.notes,
            created_at=goal.created_at,
            updated_at=goal.updated_at,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, goal: CategoryGoal) -> CategoryGoal:
        """Update an existing goal."""
        stmt = select(GoalModel).where(GoalModel.id == goal.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Goal {goal.id} not found")

        model.goal_hours = goal.goal_hours
        model.notes = goal.notes
        model.updated_at = goal.updated_at

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a goal."""
        model = await self._session.get(GoalModel, id)
        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    def _to_entity(self, model: GoalModel) -> CategoryGoal:
        """Convert ORM model to domain entity."""
        return CategoryGoal(
            id=model.id,
            user_id=model.user_id,
            category_id=model.category_id,
            goal_hours=model.goal_hours,
            notes=model.notes,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
