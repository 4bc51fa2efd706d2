"""Score ledger: derived points written only by stage transitions.

Nothing outside the transition engine creates entries, and the API offers no
way to write one. Every award requires an assigned dev manager; a missing
one rejects the whole transition instead of silently skipping the points.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core.config import Settings, settings
from app.exceptions.project import DevLeadRequiredError
from models.base import utcnow
from models.project import Project
from models.score import ScoreEntry


@dataclass(frozen=True)
class ScoringPolicy:
    delivery: int = 10
    on_time: int = 5
    qa_first_pass: int = 2
    early_per_day: int = 1
    qa_rejection: int = -5
    deadline_missed: int = -10
    delay_per_day: int = -2

    @classmethod
    def from_settings(cls, config: Settings) -> "ScoringPolicy":
        return cls(
            delivery=config.scoring_delivery,
            on_time=config.scoring_on_time,
            qa_first_pass=config.scoring_qa_first_pass,
            early_per_day=config.scoring_early_per_day,
            qa_rejection=config.scoring_qa_rejection,
            deadline_missed=config.scoring_deadline_missed,
            delay_per_day=config.scoring_delay_per_day,
        )


def completion_awards(
    overall_deadline: datetime, completed_at: datetime, policy: ScoringPolicy
) -> list[tuple[int, str]]:
    """Points earned by completing a project, measured against the baseline deadline.

    Whole days only: finishing 30 hours early earns one early day, finishing
    5 hours late costs the missed-deadline penalty but no per-day delay.
    """
    awards = [(policy.delivery, "Project Delivery")]

    if completed_at <= overall_deadline:
        awards.append((policy.on_time, "On-Time Bonus"))
        early_days = (overall_deadline - completed_at).days
        if early_days > 0 and policy.early_per_day:
            awards.append(
                (policy.early_per_day * early_days, f"Early Delivery Bonus ({early_days} days)")
            )
    else:
        awards.append((policy.deadline_missed, "Deadline Missed Penalty"))
        late_days = (completed_at - overall_deadline).days
        if late_days > 0 and policy.delay_per_day:
            awards.append((policy.delay_per_day * late_days, f"Delay Penalty ({late_days} days)"))

    return awards


class ScoringLedger:
    """Stages ``ScoreEntry`` rows inside the current transition's transaction."""

    def __init__(self, db: AsyncSession, policy: ScoringPolicy | None = None):
        self.db = db
        self.policy = policy or ScoringPolicy.from_settings(settings)

    @staticmethod
    def require_dev_lead(project: Project) -> UUID:
        if project.assigned_dev_manager_id is None:
            raise DevLeadRequiredError()
        return project.assigned_dev_manager_id

    def award(self, project: Project, points: int, reason: str, when: datetime | None = None):
        entry = ScoreEntry(
            project_id=project.id,
            tenant_id=project.tenant_id,
            user_id=self.require_dev_lead(project),
            date=when or utcnow(),
            points=points,
            reason=reason,
        )
        self.db.add(entry)
        return entry

    def record_completion(self, project: Project, completed_at: datetime) -> list[ScoreEntry]:
        self.require_dev_lead(project)
        return [
            self.award(project, points, reason, completed_at)
            for points, reason in completion_awards(
                project.overall_deadline, completed_at, self.policy
            )
        ]

    def record_qa_pass(self, project: Project) -> list[ScoreEntry]:
        """First-time pass bonus; a project that failed QA before earns nothing here."""
        self.require_dev_lead(project)
        if project.qa_fail_count:
            return []
        return [self.award(project, self.policy.qa_first_pass, "QA First Pass Bonus")]

    def record_qa_rejection(self, project: Project) -> ScoreEntry:
        return self.award(project, self.policy.qa_rejection, "QA Rejection Penalty")

    async def for_project(self, project_id: UUID, tenant_id: UUID) -> list[ScoreEntry]:
        stmt = (
            select(ScoreEntry)
            .where(ScoreEntry.project_id == project_id, ScoreEntry.tenant_id == tenant_id)
            .order_by(ScoreEntry.date, ScoreEntry.created_at)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def for_tenant(self, tenant_id: UUID, limit: int = 500) -> list[ScoreEntry]:
        stmt = (
            select(ScoreEntry)
            .where(ScoreEntry.tenant_id == tenant_id)
            .order_by(desc(ScoreEntry.date))
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
