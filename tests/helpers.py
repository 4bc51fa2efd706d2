"""Read helpers for asserting on committed state.

Services roll the session back on rejected mutations, which expires every
loaded object; these helpers always read fresh rows.
"""

from uuid import UUID

from sqlalchemy import func
from sqlalchemy.future import select

from app.core.security import create_access_token
from models import AuditLog, HistoryItem, Project, ScoreEntry


def auth_headers(user_id) -> dict:
    """Bearer header carrying a real signed token for ``user_id``."""
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


async def reload_project(session, project_id: UUID) -> Project:
    return await session.get(Project, project_id, populate_existing=True)


async def history_for(session, project_id: UUID) -> list[HistoryItem]:
    result = await session.execute(
        select(HistoryItem)
        .where(HistoryItem.project_id == project_id)
        .order_by(HistoryItem.timestamp, HistoryItem.created_at)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def scores_for(session, project_id: UUID) -> list[ScoreEntry]:
    result = await session.execute(
        select(ScoreEntry)
        .where(ScoreEntry.project_id == project_id)
        .order_by(ScoreEntry.created_at)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def audit_actions(session, tenant_id: UUID) -> list[str]:
    result = await session.execute(
        select(AuditLog.action).where(AuditLog.tenant_id == tenant_id).order_by(AuditLog.timestamp)
    )
    return list(result.scalars().all())


async def count_rows(session, model) -> int:
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar() or 0
