"""Append-only project timeline."""

import copy
from typing import Any
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from models.base import utcnow
from models.enums import ProjectStage
from models.history import HistoryItem
from models.project import Project

from .permissions import Actor


class HistoryLog:
    """Writes and reads ``HistoryItem`` rows. Rows are never updated."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def append(
        self,
        project: Project,
        actor: Actor,
        action: str,
        stage: ProjectStage | None = None,
        rejection_snapshot: list[dict[str, Any]] | None = None,
    ) -> HistoryItem:
        """Stage the entry in the current transaction; it commits with the mutation."""
        item = HistoryItem(
            project_id=project.id,
            tenant_id=project.tenant_id,
            user_id=actor.id,
            stage=stage or project.stage,
            action=action,
            timestamp=utcnow(),
            rejection_snapshot=(
                copy.deepcopy(rejection_snapshot) if rejection_snapshot is not None else None
            ),
        )
        self.db.add(item)
        return item

    async def for_project(self, project_id: UUID, tenant_id: UUID) -> list[HistoryItem]:
        stmt = (
            select(HistoryItem)
            .where(HistoryItem.project_id == project_id, HistoryItem.tenant_id == tenant_id)
            .order_by(HistoryItem.timestamp, HistoryItem.created_at)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def activity_feed(self, tenant_id: UUID, limit: int = 100) -> list[dict[str, Any]]:
        """Latest history entries across all of a tenant's projects, newest first."""
        stmt = (
            select(HistoryItem, Project.name)
            .join(Project, Project.id == HistoryItem.project_id)
            .where(HistoryItem.tenant_id == tenant_id)
            .order_by(desc(HistoryItem.timestamp))
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return [
            {
                "id": item.id,
                "project_id": item.project_id,
                "project_name": project_name,
                "stage": item.stage,
                "action": item.action,
                "user_id": item.user_id,
                "timestamp": item.timestamp,
            }
            for item, project_name in result.all()
        ]
