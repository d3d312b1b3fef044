"""Goal repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.goal import CategoryGoal


class IGoalRepository(Protocol):
    """Repository interface for CategoryGoal entities."""

    async def get_all_for_user(self, user_id: UUID) -> list[CategoryGoal]:
        """Get every goal the user has set."""
        ...

    async def get_for_category(self, user_id: UUID, category_id: UUID) -> CategoryGoal | None:
        """Get the user's goal for one category."""
        ...

    async def create(self, goal: CategoryGoal) -> CategoryGoal:
        """Create a new goal."""
        ...

    async def update(self, goal: CategoryGoal) -> CategoryGoal:
        """Update an existing goal."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a goal."""
        ...
