"""Wellness entry repository protocol."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from domain.entities.entry import WellnessEntry


class IEntryRepository(Protocol):
    """Repository interface for WellnessEntry entities."""

    async def get(self, id: UUID) -> WellnessEntry | None:
        """Get an entry by ID."""
        ...

    async def get_for_user(
        self,
        user_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
        category_id: UUID | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[WellnessEntry]:
        """Get a user's entries, newest first, optionally filtered."""
        ...

    async def sum_minutes_by_category(
        self,
        user_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> dict[UUID, tuple[int, int]]:
        """Map category ID to (total minutes, entry count) in a range."""
        ...

    async def create(self, entry: WellnessEntry) -> WellnessEntry:
        """Create a new entry."""
        ...

    async def update(self, entry: WellnessEntry) -> WellnessEntry:
        """Update an existing entry."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete an entry."""
        ...
