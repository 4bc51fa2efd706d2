"""Optimistic concurrency guard for project mutations.

Every write to a project goes through ``VersionGuard.apply_if_current``. The
caller supplies the version it last read; the guard compares it with the
stored row, runs the mutation, and flushes an UPDATE that SQLAlchemy guards
with ``WHERE version = <expected>`` (``version_id_col`` on ``Project``). A
concurrent writer that committed in between makes that UPDATE match zero
rows, which surfaces as ``StaleDataError`` and is reported as a conflict.
Nothing is committed for a rejected mutation: no history, no score, no
notification.
"""

import logging
from collections.abc import Awaitable, Callable, Iterable
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm.exc import StaleDataError

from app.exceptions.base import BaseAppException, ConflictError, ValidationError
from app.exceptions.project import ProjectNotFoundError
from app.services.invalidation import InvalidateKey, InvalidationEmitter
from models.base import utcnow
from models.project import Project

logger = logging.getLogger(__name__)

Mutator = Callable[[Project], Awaitable[Iterable[InvalidateKey] | None]]


class VersionGuard:
    """Applies a mutation to one project only if its version is still current."""

    def __init__(self, db: AsyncSession, tenant_id: UUID, emitter: InvalidationEmitter):
        self.db = db
        self.tenant_id = tenant_id
        self.emitter = emitter

    async def apply_if_current(
        self, project_id: UUID, expected_version: int, mutator: Mutator
    ) -> Project:
        """Run ``mutator`` against the project and commit it with a version bump.

        Args:
            project_id: Project to mutate (must belong to the guard's tenant)
            expected_version: Version the caller last observed
            mutator: Coroutine changing the project in place; returns the
                invalidation keys beyond ``projects`` that the change affects

        Returns:
            The committed project, ``version`` incremented by exactly one

        Raises:
            ProjectNotFoundError: Unknown id or another tenant's project
            ConflictError: Stored version differs from ``expected_version``
            BaseAppException: Whatever the mutator rejected the change with
        """
        project = await self.load(project_id)
        if project.version != expected_version:
            conflict = ConflictError(
                current_version=project.version,
                expected_version=expected_version,
                updated_at=project.updated_at,
            )
            logger.warning(
                f"Version conflict on project {project_id}: "
                f"expected {expected_version}, stored {conflict.current_version}"
            )
            raise conflict

        try:
            extra_keys = await mutator(project)
            project.updated_at = utcnow()
            await self.db.flush()
            await self.db.commit()
        except StaleDataError:
            await self.db.rollback()
            current_version, updated_at = await self._current_state(project_id)
            logger.warning(
                f"Concurrent write won the race on project {project_id} "
                f"(expected {expected_version}, now {current_version})"
            )
            raise ConflictError(
                current_version=current_version,
                expected_version=expected_version,
                updated_at=updated_at,
            )
        except BaseAppException:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ValidationError(f"Failed to update project: {str(e)}")

        keys = {InvalidateKey.PROJECTS, *(extra_keys or ())}
        logger.info(f"✅ Project {project_id} committed at version {project.version}")
        self._notify(keys)
        return project

    async def load(self, project_id: UUID) -> Project:
        """Read the project fresh from the database, bypassing the identity map."""
        stmt = (
            select(Project)
            .where(Project.id == project_id, Project.tenant_id == self.tenant_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        project = result.scalar_one_or_none()
        if project is None:
            raise ProjectNotFoundError()
        return project

    async def _current_state(self, project_id: UUID):
        stmt = select(Project.version, Project.updated_at).where(Project.id == project_id)
        row = (await self.db.execute(stmt)).one_or_none()
        if row is None:
            return None, None
        return row.version, row.updated_at

    def _notify(self, keys: set[InvalidateKey]) -> None:
        try:
            self.emitter.notify(self.tenant_id, keys)
        except Exception:
            logger.exception(f"Invalidation emitter failed for tenant {self.tenant_id}")
