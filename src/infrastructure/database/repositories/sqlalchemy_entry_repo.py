"""SQLAlchemy implementation of Entry repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.entry import WellnessEntry
from infrastructure.database.models import EntryModel


class SQLAlchemyEntryRepository:
    """SQLAlchemy implementation of IEntryRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> WellnessEntry | None:
        """Get an entry by ID."""
        model = await self._session.get(EntryModel, id)
        return self._to_entity(model) if model else None

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
        stmt = self._in_range(select(EntryModel), user_id, start, end)
        if category_id is not None:
            stmt = stmt.where(EntryModel.category_id == category_id)
        stmt = stmt.order_by(EntryModel.logged_at.desc()).limit(limit).offset(offset)

        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def sum_minutes_by_category(
        self,
        user_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> dict[UUID, tuple[int, int]]:
        """Map category ID to (total minutes, entry count) in a range."""
        stmt = self._in_range(
            select(
                EntryModel.category_id,
                func.sum(EntryModel.duration).label("minutes"),
                func.count().label("entry_count"),
            ),
            user_id,
            start,
            end,
        ).group_by(EntryModel.category_id)

        result = await self._session.execute(stmt)
        return {row.category_id: (int(row.minutes or 0), row.entry_count) for row in result}

    async def create(self, entry: WellnessEntry) -> WellnessEntry:
        """Create a new entry."""
        model = EntryModel(
            id=entry.id,
            user_id=entry.user_id,
            category_id=entry.category_id,
            duration=entry.duration,
            notes=entry.notes,
            logged_at=entry.logged_at,
            created_at=entry.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, entry: WellnessEntry) -> WellnessEntry:
        """Update an existing entry."""
        model = await self._session.get(EntryModel, entry.id)
        if not model:
            raise ValueError(f"Entry {entry.id} not found")

        model.category_id = entry.category_id
        model.duration = entry.duration
        model.notes = entry.notes
        model.logged_at = entry.logged_at

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete an entry."""
        model = await self._session.get(EntryModel, id)
        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    @staticmethod
    def _in_range(
        stmt: Select,
        user_id: UUID,
        start: datetime | None,
        end: datetime | None,
    ) -> Select:
        stmt = stmt.where(EntryModel.user_id == user_id)
        if start is not None:
            stmt = stmt.where(EntryModel.logged_at >= start)
        if end is not None:
            stmt = stmt.where(EntryModel.logged_at <= end)
        return stmt

    def _to_entity(self, model: EntryModel) -> WellnessEntry:
        """Convert ORM model to domain entity."""
        return WellnessEntry(
            id=model.id,
            user_id=model.user_id,
            category_id=model.category_id,
            duration=model.duration,
            notes=model.notes,
            logged_at=model.logged_at,
            created_at=model.created_at,
        )
