"""Category repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.category import WellnessCategory


class ICategoryRepository(Protocol):
    """Repository interface for WellnessCategory entities."""

    async def get(self, id: UUID) -> WellnessCategory | None:
        """Get a category by ID."""
        ...

    async def get_visible_to_user(self, user_id: UUID) -> list[WellnessCategory]:
        """Get system defaults plus the user's own categories."""
        ...

    async def get_by_name(self, user_id: UUID, name: str) -> WellnessCategory | None:
        """Get a category visible to the user by case-insensitive name."""
        ...

    async def create(self, category: WellnessCategory) -> WellnessCategory:
        """Create a new category."""
        ...

    async def update(self, category: WellnessCategory) -> WellnessCategory:
        """Update an existing category."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a category (goals and entries cascade)."""
        ...
