"""
API tests for the rankings endpoint.
"""

import pytest
from fastapi import status
from httpx import AsyncClient

from models import UserRole
from tests.factories import create_user
from tests.helpers import auth_headers


class TestRankingController:
    """Test cases for GET /api/rankings/."""

    @pytest.mark.asyncio
    async def test_rankings_after_completion(
        self, client: AsyncClient, review_project, dev_manager, admin_headers, emitter
    ):
        completed = await client.post(
            f"/api/projects/{review_project.id}/advance-stage",
            json={"next_stage": "COMPLETED", "version": 1},
            headers=admin_headers,
        )
        assert completed.status_code == status.HTTP_200_OK

        response = await client.get("/api/rankings/", headers=admin_headers)

        assert response.status_code == status.HTTP_200_OK
        rankings = response.json()["data"]
        assert len(rankings) == 1
        entry = rankings[0]
        assert entry["rank"] == 1
        assert entry["user_id"] == str(dev_manager.id)
        assert entry["total_points"] > 0
        assert entry["completed_this_month"] == 1
        assert entry["on_time_delivery_rate"] == 100
        assert entry["qa_first_time_right_rate"] == 100
        assert entry["has_data"] is True

    @pytest.mark.asyncio
    async def test_manager_without_projects(
        self, client: AsyncClient, test_db, tenant, dev_manager, designer_headers
    ):
        response = await client.get("/api/rankings/", headers=designer_headers)

        entry = response.json()["data"][0]
        assert entry["total_points"] == 0
        assert entry["qa_first_time_right_rate"] is None
        assert entry["on_time_delivery_rate"] is None
        assert entry["has_data"] is False

    @pytest.mark.asyncio
    async def test_rankings_are_tenant_scoped(
        self, client: AsyncClient, test_db, tenant, other_tenant, dev_manager
    ):
        outsider = await create_user(test_db, other_tenant.id, UserRole.ADMIN)

        response = await client.get("/api/rankings/", headers=auth_headers(outsider.id))

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"] == []
