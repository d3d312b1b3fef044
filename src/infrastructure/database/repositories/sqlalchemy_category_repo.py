"""SQLAlchemy implementation of Category repository."""

from uuid import UUID

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.category import WellnessCategory
from infrastructure.database.models import CategoryModel, EntryModel, GoalModel


class SQLAlchemyCategoryRepository:
    """SQLAlchemy implementation of ICategoryRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> WellnessCategory | None:
        """Get a category by ID."""
        stmt = select(CategoryModel).where(CategoryModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_visible_to_user(self, user_id: UUID) -> list[WellnessCategory]:
        """Get system defaults plus the user's own categories."""
        stmt = (
            select(CategoryModel)
            .where(or_(CategoryModel.user_id.is_(None), CategoryModel.user_id == user_id))
            .order_by(CategoryModel.display_order, CategoryModel.name)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_by_name(self, user_id: UUID, name: str) -> WellnessCategory | None:
        """Get a category visible to the user by case-insensitive name."""
        stmt = (
            select(CategoryModel)
            .where(
                or_(CategoryModel.user_id.is_(None), CategoryModel.user_id == user_id),
                func.lower(CategoryModel.name) == name.strip().lower(),
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, category: WellnessCategory) -> WellnessCategory:
        """Create a new category."""
        model = self._to_model(category)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, category: WellnessCategory) -> WellnessCategory:
        """Update an existing category."""
        stmt = select(CategoryModel).where(CategoryModel.id == category.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Category {category.id} not found")

        model.name = category.name
        model.color = category.color
        model.icon = category.icon
        model.description = category.description
        model.display_order = category.display_order
        model.is_active = category.is_active
        model.updated_at = category.updated_at

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a category together with its goals and entries."""
        stmt = select(CategoryModel).where(CategoryModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False

        # Explicit so the cascade also holds where FK enforcement is off.
        await self._session.execute(delete(GoalModel).where(GoalModel.category_id == id))
        await self._session.execute(delete(EntryModel).where(EntryModel.category_id == id))
        await self._session.delete(model)
        await self._session.flush()
        return True

    def _to_entity(self, model: CategoryModel) -> WellnessCategory:
        """Convert ORM model to domain entity."""
        return WellnessCategory(
            id=model.id,
            user_id=model.user_id,
            name=model.name,
            color=model.color,
            icon=model.icon,
            description=model.description,
            display_order=model.display_order,
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: WellnessCategory) -> CategoryModel:
        """Convert domain entity to ORM model."""
        return CategoryModel(
            id=entity.id,
            user_id=entity.user_id,
            name=entity.name,
            color=entity.color,
            icon=entity.icon,
            description=entity.description,
            display_order=entity.display_order,
            is_active=entity.is_active,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
