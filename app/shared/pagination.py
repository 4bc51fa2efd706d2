"""Pagination utilities."""

from typing import Any, Dict

from pydantic import BaseModel, Field
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.sql import Select


class PaginationParams(BaseModel):
    """Pagination parameters."""

    page: int = Field(default=1, ge=1, description="Page number (1-based)")
    size: int = Field(default=20, ge=1, le=100, description="Page size")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size


async def paginate(db: AsyncSession, query: Select, pagination: PaginationParams) -> Dict[str, Any]:
    """
    Run one page of an ORM select together with the total row count.

    Args:
        db: Database session
        query: Ordered SQLAlchemy select returning one entity per row
        pagination: Pagination parameters

    Returns:
        Dictionary with the page items and paging flags
    """
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar() or 0

    total_pages = (total + pagination.size - 1) // pagination.size  # Ceiling division

    page_query = (
        query.offset(pagination.offset)
        .limit(pagination.size)
        .execution_options(populate_existing=True)
    )
    items = (await db.execute(page_query)).scalars().all()

    return {
        "items": items,
        "total": total,
        "page": pagination.page,
        "size": pagination.size,
        "has_next": pagination.page < total_pages,
        "has_prev": pagination.page > 1,
        "total_pages": total_pages,
    }
