"""Wellness entry service layer with business logic."""

from datetime import datetime
from typing import Callable, List, Optional
from uuid import UUID

from core.cache import CacheTTL, QueryCache, query_cache, user_tag
from core.exceptions import CategoryNotFoundError, EntryNotFoundError, ValidationError
from domain.entities.entry import MAX_ENTRY_MINUTES, EntryStats, WellnessEntry, to_naive_utc
from domain.repositories.unit_of_work import IUnitOfWork


class EntryService:
    """Service layer for WellnessEntry business logic."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        cache: QueryCache = query_cache,
    ) -> None:
        self._uow_factory = uow_factory
        self._cache = cache

    async def list_for_user(
        self,
        user_id: UUID,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        category_id: Optional[UUID] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[WellnessEntry]:
        """Get the user's entries, newest first."""
        start, end = to_naive_utc(start), to_naive_utc(end)

        async def load() -> List[WellnessEntry]:
            async with self._uow_factory() as uow:
                return await uow.entries.get_for_user(
                    user_id,
                    start=start,
                    end=end,
                    category_id=category_id,
                    limit=limit,
                    offset=offset,
                )

        key = ":".join(
            str(part)
            for part in ("entries:list", user_id, start, end, category_id, limit, offset)
        )
        return await self._cache.get_or_load(  # type: ignore[no-any-return]
            key,
            load,
            ttl=CacheTTL.SHORT,
            tags=[user_tag("entries", user_id)],
        )

    async def get(self, entry_id: UUID, user_id: UUID) -> WellnessEntry:
        """Get one of the user's entries."""
        async with self._uow_factory() as uow:
            return await self._get_owned(uow, entry_id, user_id)

    async def create(
        self,
        user_id: UUID,
        category_id: UUID,
        duration: int,
        notes: Optional[str] = None,
        logged_at: Optional[datetime] = None,
    ) -> WellnessEntry:
        """Record an activity against a category visible to the user."""
        self._validate_duration(duration)

        async with self._uow_factory() as uow:
            await self._require_category(uow, category_id, user_id)

            entry = WellnessEntry(
                user_id=user_id,
                category_id=category_id,
                duration=duration,
                notes=notes or None,
            )
            if logged_at is not None:
                entry.logged_at = to_naive_utc(logged_at)

            created = await uow.entries.create(entry)
            await uow.commit()

        self._invalidate(user_id)
        return created

    async def update(
        self,
        entry_id: UUID,
        user_id: UUID,
        category_id: Optional[UUID] = None,
        duration: Optional[int] = None,
        notes: Optional[str] = None,
        logged_at: Optional[datetime] = None,
    ) -> WellnessEntry:
        """Update one of the user's entries."""
        if duration is not None:
            self._validate_duration(duration)

        async with self._uow_factory() as uow:
            entry = await self._get_owned(uow, entry_id, user_id)

            if category_id is not None and category_id != entry.category_id:
                await self._require_category(uow, category_id, user_id)
                entry.category_id = category_id
            if duration is not None:
                entry.duration = duration
            if notes is not None:
                entry.notes = notes or None
            if logged_at is not None:
                entry.logged_at = to_naive_utc(logged_at)

            updated = await uow.entries.update(entry)
            await uow.commit()

        self._invalidate(user_id)
        return updated

    async def delete(self, entry_id: UUID, user_id: UUID) -> bool:
        """Delete one of the user's entries."""
        async with self._uow_factory() as uow:
            await self._get_owned(uow, entry_id, user_id)
            deleted = await uow.entries.delete(entry_id)
            await uow.commit()

        self._invalidate(user_id)
        return deleted  # type: ignore[no-any-return]

    async def stats(
        self,
        user_id: UUID,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> EntryStats:
        """Total minutes, entry count and minutes per category in a range."""
        start, end = to_naive_utc(start), to_naive_utc(end)
        async with self._uow_factory() as uow:
            totals = await uow.entries.sum_minutes_by_category(user_id, start=start, end=end)

        return EntryStats(
            total_minutes=sum(minutes for minutes, _ in totals.values()),
            entry_count=sum(count for _, count in totals.values()),
            minutes_by_category={cat_id: minutes for cat_id, (minutes, _) in totals.items()},
        )

    async def _get_owned(
        self, uow: IUnitOfWork, entry_id: UUID, user_id: UUID
    ) -> WellnessEntry:
        entry = await uow.entries.get(entry_id)
        if not entry or entry.user_id != user_id:
            raise EntryNotFoundError(str(entry_id))
        return entry

    async def _require_category(
        self, uow: IUnitOfWork, category_id: UUID, user_id: UUID
    ) -> None:
        category = await uow.categories.get(category_id)
        if not category or not category.is_visible_to(user_id):
            raise CategoryNotFoundError(str(category_id))

    @staticmethod
    def _validate_duration(duration: int) -> None:
        if not 1 <= duration <= MAX_ENTRY_MINUTES:
            raise ValidationError(
                f"Duration must be between 1 and {MAX_ENTRY_MINUTES} minutes",
                field="duration",
            )

    def _invalidate(self, user_id: UUID) -> None:
        self._cache.invalidate_many(
            [user_tag("entries", user_id), user_tag("dashboard", user_id)]
        )
