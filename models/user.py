"""
Provides the User model for the application's database schema.

A user belongs to one tenant and holds exactly one role. The role decides
which lead slot on a project the user may occupy.

Attributes
----------
tenant_id : sqlalchemy.Column
    Tenant the user belongs to.
email : sqlalchemy.Column
    The email address of the user, unique across the installation.
name : sqlalchemy.Column
    Display name.
role : sqlalchemy.Column
    One of ``UserRole``.
is_active : sqlalchemy.Column
    A boolean indicating if the user is active. Defaults to `True`.
"""

from sqlalchemy import Boolean, Column, Enum, ForeignKey, String
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel
from .enums import UserRole


class User(BaseModel):
    """
    Represents a user entity in the application.

    :ivar tenant_id: Tenant the user belongs to.
    :type tenant_id: uuid.UUID
    :ivar email: Email address of the user. It must be unique.
    :type email: str
    :ivar name: Display name of the user.
    :type name: str
    :ivar role: Role of the user within the tenant.
    :type role: UserRole
    :ivar is_active: Indicates whether the user account is active.
    :type is_active: bool
    """

    __tablename__ = "users"

    tenant_id = Column(UUID(), ForeignKey("tenants.id"), nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False)
    name = Column(String(255), nullable=False)
    role = Column(Enum(UserRole, native_enum=False, length=20), nullable=False)
    is_active = Column(Boolean, default=True)

    tenant = relationship("Tenant", back_populates="users")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
