"""
Tests for Roster API Endpoints
"""

from httpx import AsyncClient


def auth(email: str) -> dict[str, str]:
    return {"Authorization": f"Bearer token-{email}"}


class TestListPairs:
    async def test_educator_sees_own_pair(self, client: AsyncClient):
        response = await client.get("/api/v1/roster/", headers=auth("a@x.org"))

        assert response.status_code == 200
        data = response.json()
        assert [entry["pair_id"] for entry in data] == ["P1"]
        assert data[0]["editable_parts"] == ["Part1"]
        assert data[0]["school_name"] == "Lincoln Elementary"
        assert data[0]["label"]

    async def test_evaluator_sees_both_pairs(self, client: AsyncClient):
        response = await client.get("/api/v1/roster/", headers=auth("b@x.org"))

        data = response.json()
        assert [entry["pair_id"] for entry in data] == ["P1", "P2"]
        assert all(entry["editable_parts"] == ["Part2", "Part4"] for entry in data)

    async def test_admin_sees_all_without_edit_rights(self, client: AsyncClient):
        response = await client.get("/api/v1/roster/", headers=auth("admin@x.org"))

        data = response.json()
        assert [entry["pair_id"] for entry in data] == ["P1", "P2", "P3"]
        assert all(entry["editable_parts"] == [] for entry in data)

    async def test_outsider_sees_empty_roster(self, client: AsyncClient):
        response = await client.get("/api/v1/roster/", headers=auth("z@x.org"))

        assert response.status_code == 200
        assert response.json() == []

    async def test_requires_session(self, client: AsyncClient):
        response = await client.get("/api/v1/roster/")
        assert response.status_code == 401
