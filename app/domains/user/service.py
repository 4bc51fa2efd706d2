# app/domains/user/service.py
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models import User
from models.enums import UserRole


class UserService:
    """Read access to the users of one tenant."""

    def __init__(self, db: AsyncSession, tenant_id: UUID):
        self.db = db
        self.tenant_id = tenant_id

    async def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        """Get a user by ID within the tenant."""
        result = await self.db.execute(
            select(User).where(User.id == user_id, User.tenant_id == self.tenant_id)
        )
        return result.scalar_one_or_none()

    async def list_users(self, role: Optional[UserRole] = None, active_only: bool = True) -> List[User]:
        """List tenant users, optionally only those holding ``role`` (e.g. lead candidates)."""
        stmt = select(User).where(User.tenant_id == self.tenant_id)
        if role is not None:
            stmt = stmt.where(User.role == role)
        if active_only:
            stmt = stmt.where(User.is_active.is_(True))
        result = await self.db.execute(stmt.order_by(User.name))
        return list(result.scalars().all())
