"""
Unit tests for pagination utilities.
"""

import pytest
from pydantic import ValidationError
from sqlalchemy import desc
from sqlalchemy.future import select

from app.shared.pagination import PaginationParams, paginate
from models import Project
from tests.factories import create_project


class TestPaginationParams:
    """Test cases for PaginationParams."""

    def test_defaults(self):
        params = PaginationParams()

        assert params.page == 1
        assert params.size == 20
        assert params.offset == 0

    def test_offset(self):
        assert PaginationParams(page=3, size=10).offset == 20

    @pytest.mark.parametrize("page,size", [(0, 10), (1, 0), (1, 101)])
    def test_invalid_values(self, page, size):
        with pytest.raises(ValidationError):
            PaginationParams(page=page, size=size)


class TestPaginate:
    """Test cases for paginate()."""

    @pytest.mark.asyncio
    async def test_pages_through_results(self, test_db, tenant):
        for n in range(5):
            await create_project(test_db, tenant.id, name=f"Site {n}")
        query = select(Project).order_by(desc(Project.name))

        first = await paginate(test_db, query, PaginationParams(page=1, size=2))
        last = await paginate(test_db, query, PaginationParams(page=3, size=2))

        assert first["total"] == 5
        assert first["total_pages"] == 3
        assert [p.name for p in first["items"]] == ["Site 4", "Site 3"]
        assert first["has_next"] is True
        assert first["has_prev"] is False
        assert [p.name for p in last["items"]] == ["Site 0"]
        assert last["has_next"] is False
        assert last["has_prev"] is True

    @pytest.mark.asyncio
    async def test_empty_result(self, test_db, tenant):
        result = await paginate(test_db, select(Project), PaginationParams())

        assert result["items"] == []
        assert result["total"] == 0
        assert result["total_pages"] == 0
        assert result["has_next"] is False
