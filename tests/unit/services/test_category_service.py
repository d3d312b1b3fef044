"""Unit tests for CategoryService."""

from uuid import UUID, uuid4

import pytest

from core.cache import QueryCache, user_tag
from core.exceptions import (
    CategoryNotFoundError,
    DuplicateCategoryError,
    SystemCategoryError,
)
from domain.entities.category import WellnessCategory
from domain.services.category_service import CategoryService
from tests.unit.conftest import FakeUnitOfWork


@pytest.fixture
def service(uow: FakeUnitOfWork, cache: QueryCache) -> CategoryService:
    return CategoryService(lambda: uow, cache)


class TestListForUser:
    @pytest.mark.asyncio
    async def test_cached_until_a_write(
        self,
        service: CategoryService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        system_category: WellnessCategory,
    ):
        uow.categories.get_visible_to_user.return_value = [system_category]
        uow.categories.get_by_name.return_value = None
        uow.categories.create.side_effect = lambda c: c

        await service.list_for_user(user_id)
        await service.list_for_user(user_id)
        assert uow.categories.get_visible_to_user.call_count == 1

        await service.create(user_id, "Reading")
        await service.list_for_user(user_id)
        assert uow.categories.get_visible_to_user.call_count == 2


class TestCreate:
    @pytest.mark.asyncio
    async def test_creates_owned_category_with_normalized_color(
        self, service: CategoryService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.categories.get_by_name.return_value = None
        uow.categories.create.side_effect = lambda c: c

        category = await service.create(user_id, "Reading", color="22c55e")

        assert category.user_id == user_id
        assert category.color == "#22C55E"
        assert uow.committed

    @pytest.mark.asyncio
    async def test_duplicate_name_rejected(
        self,
        service: CategoryService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        system_category: WellnessCategory,
    ):
        uow.categories.get_by_name.return_value = system_category

        with pytest.raises(DuplicateCategoryError) as exc_info:
            await service.create(user_id, "work")

        assert exc_info.value.status_code == 409
        uow.categories.create.assert_not_called()


class TestUpdate:
    @pytest.mark.asyncio
    async def test_updates_own_category(
        self,
        service: CategoryService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        own_category: WellnessCategory,
    ):
        uow.categories.get.return_value = own_category
        uow.categories.get_by_name.return_value = None
        uow.categories.update.side_effect = lambda c: c

        updated = await service.update(
            own_category.id, user_id, name="Books", color="#abcdef", is_active=False
        )

        assert updated.name == "Books"
        assert updated.color == "#ABCDEF"
        assert updated.is_active is False

    @pytest.mark.asyncio
    async def test_system_category_is_read_only(
        self,
        service: CategoryService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        system_category: WellnessCategory,
    ):
        uow.categories.get.return_value = system_category

        with pytest.raises(SystemCategoryError):
            await service.update(system_category.id, user_id, name="Job")

        uow.categories.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_other_users_category_not_found(
        self, service: CategoryService, uow: FakeUnitOfWork, other_user_id: UUID
    ):
        uow.categories.get.return_value = WellnessCategory(name="Private", user_id=uuid4())

        with pytest.raises(CategoryNotFoundError):
            await service.update(uuid4(), other_user_id, name="Mine")

    @pytest.mark.asyncio
    async def test_rename_to_existing_name_rejected(
        self,
        service: CategoryService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        own_category: WellnessCategory,
    ):
        uow.categories.get.return_value = own_category
        uow.categories.get_by_name.return_value = WellnessCategory(name="Music", user_id=user_id)

        with pytest.raises(DuplicateCategoryError):
            await service.update(own_category.id, user_id, name="Music")


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_invalidates_dependent_reads(
        self,
        service: CategoryService,
        uow: FakeUnitOfWork,
        cache: QueryCache,
        user_id: UUID,
        own_category: WellnessCategory,
    ):
        for resource in ("categories", "goals", "entries", "dashboard"):
            cache.set(f"{resource}:cached", 1, tags=[user_tag(resource, user_id)])
        uow.categories.get.return_value = own_category
        uow.categories.delete.return_value = True

        assert await service.delete(own_category.id, user_id) is True
        assert len(cache) == 0
        assert uow.committed

    @pytest.mark.asyncio
    async def test_system_category_cannot_be_deleted(
        self,
        service: CategoryService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        system_category: WellnessCategory,
    ):
        uow.categories.get.return_value = system_category

        with pytest.raises(SystemCategoryError):
            await service.delete(system_category.id, user_id)
