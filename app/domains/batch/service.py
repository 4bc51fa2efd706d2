"""Batch operations over many projects.

UPDATE_STAGE, ASSIGN_USER and ARCHIVE run every project through the same
version-guarded transition as the single-project endpoints, one transaction
per project, and report each outcome separately. DELETE is all-or-nothing.
"""

import logging
from typing import Any, Dict, Iterable, List
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core.config import settings
from app.domains.lifecycle.audit import record_audit
from app.domains.lifecycle.permissions import Actor, require_admin
from app.domains.lifecycle.transitions import StageTransitionEngine
from app.domains.project.service import ProjectService
from app.exceptions.base import BaseAppException
from app.exceptions.project import InvalidBatchRequestError, ProjectNotFoundError
from app.schemas.batch import BatchOperation, BatchRequest
from app.services.invalidation import (
    InvalidateKey,
    InvalidationEmitter,
    get_invalidation_emitter,
)
from models.project import Project

logger = logging.getLogger(__name__)


class _KeyCollector:
    """Gathers per-item invalidation keys so the batch emits a single event."""

    def __init__(self):
        self.keys: set[InvalidateKey] = set()

    def notify(self, tenant_id: UUID, keys: Iterable[InvalidateKey]) -> None:
        self.keys.update(keys)


def _item(project_id: UUID, success: bool, error: str | None = None, code: str | None = None):
    return {"project_id": project_id, "success": success, "error": error, "error_code": code}


class BatchService:
    """Applies one operation to a list of projects."""

    def __init__(
        self, db: AsyncSession, actor: Actor, emitter: InvalidationEmitter | None = None
    ):
        self.db = db
        self.actor = actor
        self.emitter = emitter or get_invalidation_emitter()

    async def apply(self, request: BatchRequest) -> Dict[str, Any]:
        project_ids = self._dedupe(request.project_ids)
        self._validate(request, project_ids)

        collector = _KeyCollector()
        operation = request.operation
        if operation == BatchOperation.DELETE:
            results = await self._delete(project_ids, collector)
        else:
            results = await self._per_item(request, project_ids, collector)

        succeeded = sum(1 for r in results if r["success"])
        failed = len(results) - succeeded

        await self._audit(operation, project_ids, succeeded, failed)
        if collector.keys:
            try:
                self.emitter.notify(self.actor.tenant_id, collector.keys)
            except Exception:
                logger.exception(f"Invalidation emitter failed for tenant {self.actor.tenant_id}")

        logger.info(
            f"📦 Batch {operation.value} by {self.actor.id}: "
            f"{succeeded} succeeded, {failed} failed of {len(project_ids)}"
        )
        return {
            "success": failed == 0,
            "operation": operation,
            "total_requested": len(project_ids),
            "total_succeeded": succeeded,
            "total_failed": failed,
            "results": results,
        }

    # ------------------------------------------------------------------ #
    # Request validation
    # ------------------------------------------------------------------ #

    @staticmethod
    def _dedupe(project_ids: List[UUID]) -> List[UUID]:
        return list(dict.fromkeys(project_ids))

    def _validate(self, request: BatchRequest, project_ids: List[UUID]) -> None:
        if not project_ids:
            raise InvalidBatchRequestError("At least one project id is required")
        if len(project_ids) > settings.max_batch_size:
            raise InvalidBatchRequestError(
                f"Batch size exceeds maximum of {settings.max_batch_size}"
            )

        payload = request.payload
        if request.operation == BatchOperation.UPDATE_STAGE and payload.stage is None:
            raise InvalidBatchRequestError("Stage is required for UPDATE_STAGE")
        if request.operation == BatchOperation.ASSIGN_USER:
            if payload.role is None or payload.user_id is None:
                raise InvalidBatchRequestError("user_id and role are required for ASSIGN_USER")
            require_admin(self.actor, "Only admins can perform bulk assignments")
        if request.operation == BatchOperation.DELETE:
            require_admin(self.actor, "Only admins can perform bulk delete")

    # ------------------------------------------------------------------ #
    # Operations
    # ------------------------------------------------------------------ #

    async def _per_item(
        self, request: BatchRequest, project_ids: List[UUID], collector: _KeyCollector
    ) -> List[Dict[str, Any]]:
        engine = StageTransitionEngine(self.db, self.actor, collector)
        payload = request.payload
        results = []

        for project_id in project_ids:
            try:
                version = request.versions.get(project_id)
                if version is None:
                    # Read at apply time so edits made earlier in the batch are seen
                    version = await self._current_version(project_id)

                if request.operation == BatchOperation.UPDATE_STAGE:
                    await engine.advance(project_id, payload.stage, version)
                elif request.operation == BatchOperation.ASSIGN_USER:
                    await engine.reassign_lead(project_id, payload.role, payload.user_id, version)
                else:
                    await engine.archive(project_id, version)
                results.append(_item(project_id, True))
            except BaseAppException as e:
                logger.info(f"Batch item {project_id} rejected: {e.error_code} {e.message}")
                results.append(_item(project_id, False, e.message, e.error_code))

        return results

    async def _delete(
        self, project_ids: List[UUID], collector: _KeyCollector
    ) -> List[Dict[str, Any]]:
        stmt = select(Project).where(
            Project.id.in_(project_ids), Project.tenant_id == self.actor.tenant_id
        )
        result = await self.db.execute(stmt)
        projects = list(result.scalars().all())

        found = {project.id for project in projects}
        missing = [pid for pid in project_ids if pid not in found]
        if missing:
            logger.warning(f"Batch delete aborted: {len(missing)} projects not found")
            return [
                _item(pid, False, "Project not found", "PROJECT_NOT_FOUND")
                if pid in missing
                else _item(
                    pid,
                    False,
                    f"Cannot delete: {len(missing)} projects not found",
                    "DELETE_ABORTED",
                )
                for pid in project_ids
            ]

        try:
            await ProjectService(self.db, self.actor).delete_projects(projects)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"❌ Batch delete transaction failed: {e}")
            return [
                _item(pid, False, "Delete transaction failed", "DELETE_TRANSACTION_FAILED")
                for pid in project_ids
            ]

        collector.notify(
            self.actor.tenant_id,
            {InvalidateKey.PROJECTS, InvalidateKey.PROJECT_STATS, InvalidateKey.RANKINGS},
        )
        return [_item(pid, True) for pid in project_ids]

    async def _current_version(self, project_id: UUID) -> int:
        stmt = select(Project.version).where(
            Project.id == project_id, Project.tenant_id == self.actor.tenant_id
        )
        version = (await self.db.execute(stmt)).scalar_one_or_none()
        if version is None:
            raise ProjectNotFoundError("Project not found or access denied")
        return version

    async def _audit(
        self, operation: BatchOperation, project_ids: List[UUID], succeeded: int, failed: int
    ) -> None:
        record_audit(
            self.db,
            self.actor,
            f"BATCH_{operation.value}",
            f"{len(project_ids)} projects",
            {
                "operation": operation.value,
                "project_ids": [str(pid) for pid in project_ids],
                "total_requested": len(project_ids),
                "total_succeeded": succeeded,
                "total_failed": failed,
            },
        )
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Failed to write audit entry for batch {operation.value}")
            raise
