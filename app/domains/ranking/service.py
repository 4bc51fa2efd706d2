"""Dev manager leaderboard derived from the score ledger and project outcomes."""

from collections import defaultdict
from datetime import datetime
from typing import Any, Dict, List
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from models.base import utcnow
from models.enums import ProjectStage, UserRole
from models.project import Project
from models.score import ScoreEntry
from models.user import User

# Stages a project has not yet left QA from (for first-time-right purposes)
PRE_QA_STAGES = (ProjectStage.UPCOMING, ProjectStage.DESIGN, ProjectStage.DEVELOPMENT)


def _same_month(value: datetime | None, today: datetime) -> bool:
    return value is not None and value.year == today.year and value.month == today.month


def _percent(part: int, whole: int) -> int | None:
    if whole == 0:
        return None
    return round(part * 100 / whole)


class RankingService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_dev_rankings(self, tenant_id: UUID, today: datetime | None = None) -> List[Dict[str, Any]]:
        """Rank every dev manager of the tenant by total points, highest first."""
        today = today or utcnow()

        managers_result = await self.db.execute(
            select(User).where(User.tenant_id == tenant_id, User.role == UserRole.DEV_MANAGER)
        )
        managers = list(managers_result.scalars().all())
        if not managers:
            return []
        manager_ids = [m.id for m in managers]

        projects_result = await self.db.execute(
            select(
                Project.assigned_dev_manager_id,
                Project.stage,
                Project.completed_at,
                Project.overall_deadline,
                Project.qa_fail_count,
            ).where(
                Project.tenant_id == tenant_id,
                Project.assigned_dev_manager_id.in_(manager_ids),
            )
        )
        projects_by_manager = defaultdict(list)
        for row in projects_result.all():
            projects_by_manager[row.assigned_dev_manager_id].append(row)

        scores_result = await self.db.execute(
            select(ScoreEntry.user_id, ScoreEntry.points, ScoreEntry.date).where(
                ScoreEntry.tenant_id == tenant_id, ScoreEntry.user_id.in_(manager_ids)
            )
        )
        scores_by_manager = defaultdict(list)
        for row in scores_result.all():
            scores_by_manager[row.user_id].append(row)

        rankings = []
        for manager in managers:
            projects = projects_by_manager[manager.id]
            scores = scores_by_manager[manager.id]

            completed = [p for p in projects if p.stage == ProjectStage.COMPLETED]
            on_time = [
                p for p in completed if p.completed_at and p.completed_at <= p.overall_deadline
            ]
            qa_attempted = [p for p in projects if p.stage not in PRE_QA_STAGES]
            first_time_right = [p for p in qa_attempted if not p.qa_fail_count]

            rankings.append(
                {
                    "user_id": manager.id,
                    "name": manager.name,
                    "total_points": sum(s.points for s in scores),
                    "monthly_points": sum(s.points for s in scores if _same_month(s.date, today)),
                    "completed_this_month": sum(
                        1 for p in completed if _same_month(p.completed_at, today)
                    ),
                    "qa_first_time_right_rate": _percent(len(first_time_right), len(qa_attempted)),
                    "on_time_delivery_rate": _percent(len(on_time), len(completed)),
                    "has_data": bool(projects),
                }
            )

        rankings.sort(key=lambda r: r["total_points"], reverse=True)
        for position, entry in enumerate(rankings, start=1):
            entry["rank"] = position
        return rankings
