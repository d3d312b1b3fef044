"""Unit tests for GoalService."""

from uuid import UUID, uuid4

import pytest

from core.cache import QueryCache, user_tag
from core.exceptions import CategoryNotFoundError, GoalNotFoundError, ValidationError
from domain.entities.category import WellnessCategory
from domain.entities.goal import CategoryGoal
from domain.services.goal_service import GoalService
from tests.unit.conftest import FakeUnitOfWork


@pytest.fixture
def service(uow: FakeUnitOfWork, cache: QueryCache) -> GoalService:
    return GoalService(lambda: uow, cache)


class TestUpsertGoal:
    @pytest.mark.asyncio
    async def test_creates_goal_when_none_exists(
        self,
        service: GoalService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        system_category: WellnessCategory,
    ):
        uow.categories.get.return_value = system_category
        uow.goals.get_for_category.return_value = None
        uow.goals.create.side_effect = lambda g: g

        goal, created = await service.upsert_goal(user_id, system_category.id, goal_hours=10)

        assert created is True
        assert goal.goal_hours == 10
        assert goal.user_id == user_id
        assert uow.committed

    @pytest.mark.asyncio
    async def test_second_write_replaces_first(
        self,
        service: GoalService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        system_category: WellnessCategory,
    ):
        existing = CategoryGoal(user_id=user_id, category_id=system_category.id, goal_hours=10)
        uow.categories.get.return_value = system_category
        uow.goals.get_for_category.return_value = existing
        uow.goals.update.side_effect = lambda g: g

        goal, created = await service.upsert_goal(
            user_id, system_category.id, goal_hours=4.5, notes=""
        )

        assert created is False
        assert goal.id == existing.id
        assert goal.goal_hours == 4.5
        assert goal.notes is None
        uow.goals.create.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("hours", [-1, 168.5])
    async def test_hours_out_of_range(
        self, service: GoalService, uow: FakeUnitOfWork, user_id: UUID, hours: float
    ):
        with pytest.raises(ValidationError) as exc_info:
            await service.upsert_goal(user_id, uuid4(), goal_hours=hours)

        assert exc_info.value.details == {"field": "goal_hours"}
        uow.categories.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_hidden_category_rejected(
        self, service: GoalService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.categories.get.return_value = WellnessCategory(name="Private", user_id=uuid4())

        with pytest.raises(CategoryNotFoundError):
            await service.upsert_goal(user_id, uuid4(), goal_hours=2)

    @pytest.mark.asyncio
    async def test_write_invalidates_goal_list(
        self,
        service: GoalService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        system_category: WellnessCategory,
    ):
        uow.goals.get_all_for_user.return_value = []
        uow.categories.get.return_value = system_category
        uow.goals.get_for_category.return_value = None
        uow.goals.create.side_effect = lambda g: g

        assert await service.list_for_user(user_id) == []
        stored, _ = await service.upsert_goal(user_id, system_category.id, goal_hours=3)
        uow.goals.get_all_for_user.return_value = [stored]

        assert await service.list_for_user(user_id) == [stored]

    @pytest.mark.asyncio
    async def test_write_invalidates_dashboard(
        self,
        service: GoalService,
        uow: FakeUnitOfWork,
        cache: QueryCache,
        user_id: UUID,
        system_category: WellnessCategory,
    ):
        cache.set("dashboard:progress", 1, tags=[user_tag("dashboard", user_id)])
        uow.categories.get.return_value = system_category
        uow.goals.get_for_category.return_value = None
        uow.goals.create.side_effect = lambda g: g

        await service.upsert_goal(user_id, system_category.id, goal_hours=3)

        assert "dashboard:progress" not in cache


class TestDeleteGoal:
    @pytest.mark.asyncio
    async def test_deletes_existing_goal(
        self, service: GoalService, uow: FakeUnitOfWork, user_id: UUID
    ):
        goal = CategoryGoal(user_id=user_id, category_id=uuid4(), goal_hours=2)
        uow.goals.get_for_category.return_value = goal
        uow.goals.delete.return_value = True

        assert await service.delete_goal(user_id, goal.category_id) is True
        uow.goals.delete.assert_called_once_with(goal.id)

    @pytest.mark.asyncio
    async def test_missing_goal_raises(
        self, service: GoalService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.goals.get_for_category.return_value = None

        with pytest.raises(GoalNotFoundError):
            await service.delete_goal(user_id, uuid4())


@pytest.mark.asyncio
async def test_get_for_category_missing(service: GoalService, uow: FakeUnitOfWork, user_id: UUID):
    uow.goals.get_for_category.return_value = None

    with pytest.raises(GoalNotFoundError):
        await service.get_for_category(user_id, uuid4())


def test_goal_minutes():
    goal = CategoryGoal(user_id=uuid4(), category_id=uuid4(), goal_hours=1.5)

    assert goal.goal_minutes == 90
