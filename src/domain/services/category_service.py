"""Category service layer with business logic."""

from datetime import datetime
from typing import Callable, List, Optional
from uuid import UUID

from core.cache import CacheTTL, QueryCache, query_cache, user_tag
from core.exceptions import (
    CategoryNotFoundError,
    DuplicateCategoryError,
    SystemCategoryError,
)
from domain.entities.category import DEFAULT_COLOR, WellnessCategory, normalize_color
from domain.repositories.unit_of_work import IUnitOfWork

# Reads that depend on the category list. Categories are joined into goals,
# entries and the dashboard, and deletes cascade to goals and entries.
_DEPENDENT_RESOURCES = ("categories", "goals", "entries", "dashboard")


class CategoryService:
    """Service layer for WellnessCategory business logic."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        cache: QueryCache = query_cache,
    ) -> None:
        self._uow_factory = uow_factory
        self._cache = cache

    async def list_for_user(self, user_id: UUID) -> List[WellnessCategory]:
        """System default categories followed by the user's own."""

        async def load() -> List[WellnessCategory]:
            async with self._uow_factory() as uow:
                return await uow.categories.get_visible_to_user(user_id)

        return await self._cache.get_or_load(  # type: ignore[no-any-return]
            f"categories:list:{user_id}",
            load,
            ttl=CacheTTL.LONG,
            tags=[user_tag("categories", user_id)],
        )

    async def get(self, category_id: UUID, user_id: UUID) -> WellnessCategory:
        """Get a category visible to the user."""
        async with self._uow_factory() as uow:
            return await self._get_visible(uow, category_id, user_id)

    async def create(
        self,
        user_id: UUID,
        name: str,
        color: str = DEFAULT_COLOR,
        icon: Optional[str] = None,
        description: Optional[str] = None,
        display_order: int = 0,
    ) -> WellnessCategory:
        """Create a category owned by the user. Names are unique per user,
        including the system defaults."""
        async with self._uow_factory() as uow:
            if await uow.categories.get_by_name(user_id, name):
                raise DuplicateCategoryError(name)

            category = WellnessCategory(
                user_id=user_id,
                name=name,
                color=color,
                icon=icon,
                description=description,
                display_order=display_order,
            )
            created = await uow.categories.create(category)
            await uow.commit()

        self._invalidate(user_id)
        return created

    async def update(
        self,
        category_id: UUID,
        user_id: UUID,
        name: Optional[str] = None,
        color: Optional[str] = None,
        icon: Optional[str] = None,
        description: Optional[str] = None,
        display_order: Optional[int] = None,
        is_active: Optional[bool] = None,
    ) -> WellnessCategory:
        """Update one of the user's own categories."""
        async with self._uow_factory() as uow:
            category = await self._get_owned(uow, category_id, user_id)

            if name and name != category.name:
                existing = await uow.categories.get_by_name(user_id, name)
                if existing and existing.id != category.id:
                    raise DuplicateCategoryError(name)
                category.name = name

            if color:
                category.color = normalize_color(color)
            if icon is not None:
                category.icon = icon or None
            if description is not None:
                category.description = description or None
            if display_order is not None:
                category.display_order = display_order
            if is_active is not None:
                category.is_active = is_active

            category.updated_at = datetime.utcnow()
            updated = await uow.categories.update(category)
            await uow.commit()

        self._invalidate(user_id)
        return updated

    async def delete(self, category_id: UUID, user_id: UUID) -> bool:
        """Delete one of the user's own categories with its goals and entries."""
        async with self._uow_factory() as uow:
            await self._get_owned(uow, category_id, user_id)
            deleted = await uow.categories.delete(category_id)
            await uow.commit()

        self._invalidate(user_id)
        return deleted  # type: ignore[no-any-return]

    async def _get_visible(
        self, uow: IUnitOfWork, category_id: UUID, user_id: UUID
    ) -> WellnessCategory:
        category = await uow.categories.get(category_id)
        if not category or not category.is_visible_to(user_id):
            raise CategoryNotFoundError(str(category_id))
        return category

    async def _get_owned(
        self, uow: IUnitOfWork, category_id: UUID, user_id: UUID
    ) -> WellnessCategory:
        category = await self._get_visible(uow, category_id, user_id)
        if category.is_system_default:
            raise SystemCategoryError(str(category_id))
        return category

    def _invalidate(self, user_id: UUID) -> None:
        self._cache.invalidate_many(
            user_tag(resource, user_id) for resource in _DEPENDENT_RESOURCES
        )
