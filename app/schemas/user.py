"""User-related Pydantic schemas for response serialization."""

from uuid import UUID

from models.enums import UserRole

from .base import BaseModelSchema


class UserResponse(BaseModelSchema):
    """Schema for user response data."""

    tenant_id: UUID
    email: str
    name: str
    role: UserRole
    is_active: bool
