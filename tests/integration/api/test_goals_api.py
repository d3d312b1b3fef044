"""Integration tests for Goal API endpoints."""

from uuid import uuid4

import pytest
from httpx import AsyncClient

BASE = "/api/v1/goals"


async def _category_id(client: AsyncClient, name: str = "Work") -> str:
    categories = (await client.get("/api/v1/categories")).json()["data"]
    return next(c["id"] for c in categories if c["name"] == name)


class TestUpsertGoal:
    @pytest.mark.asyncio
    async def test_first_write_creates(self, authenticated_client: AsyncClient):
        category_id = await _category_id(authenticated_client)

        response = await authenticated_client.put(
            BASE, json={"category_id": category_id, "goal_hours": 10, "notes": "focus"}
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["goal_hours"] == 10
        assert data["notes"] == "focus"

    @pytest.mark.asyncio
    async def test_second_write_replaces(self, authenticated_client: AsyncClient):
        category_id = await _category_id(authenticated_client)
        first = await authenticated_client.put(
            BASE, json={"category_id": category_id, "goal_hours": 10}
        )

        second = await authenticated_client.put(
            BASE, json={"category_id": category_id, "goal_hours": 5.5}
        )

        assert second.status_code == 200
        assert second.json()["data"]["id"] == first.json()["data"]["id"]
        goals = (await authenticated_client.get(BASE)).json()["data"]
        assert [g["goal_hours"] for g in goals] == [5.5]

    @pytest.mark.asyncio
    async def test_read_after_write_sees_new_goal(self, authenticated_client: AsyncClient):
        category_id = await _category_id(authenticated_client)
        assert (await authenticated_client.get(BASE)).json()["data"] == []

        await authenticated_client.put(BASE, json={"category_id": category_id, "goal_hours": 2})

        goals = (await authenticated_client.get(BASE)).json()["data"]
        assert len(goals) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("hours", [-1, 169])
    async def test_hours_out_of_range(self, authenticated_client: AsyncClient, hours: float):
        category_id = await _category_id(authenticated_client)

        response = await authenticated_client.put(
            BASE, json={"category_id": category_id, "goal_hours": hours}
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_category(self, authenticated_client: AsyncClient):
        response = await authenticated_client.put(
            BASE, json={"category_id": str(uuid4()), "goal_hours": 2}
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "CATEGORY_NOT_FOUND"


class TestGetAndDeleteGoal:
    @pytest.mark.asyncio
    async def test_get_for_category(self, authenticated_client: AsyncClient):
        category_id = await _category_id(authenticated_client, "Faith")
        await authenticated_client.put(BASE, json={"category_id": category_id, "goal_hours": 3})

        response = await authenticated_client.get(f"{BASE}/{category_id}")

        assert response.status_code == 200
        assert response.json()["data"]["category_id"] == category_id

    @pytest.mark.asyncio
    async def test_no_goal_set(self, authenticated_client: AsyncClient):
        category_id = await _category_id(authenticated_client, "Life")

        response = await authenticated_client.get(f"{BASE}/{category_id}")

        assert response.status_code == 404
        assert response.json()["error_code"] == "GOAL_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_delete(self, authenticated_client: AsyncClient):
        category_id = await _category_id(authenticated_client)
        await authenticated_client.put(BASE, json={"category_id": category_id, "goal_hours": 3})

        response = await authenticated_client.delete(f"{BASE}/{category_id}")

        assert response.status_code == 204
        assert (await authenticated_client.get(BASE)).json()["data"] == []
        assert (await authenticated_client.delete(f"{BASE}/{category_id}")).status_code == 404
