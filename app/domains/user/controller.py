"""User directory endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_current_user, validate_token
from app.database import get_db
from app.domains.user.service import UserService
from app.schemas.base import ResponseSchema
from app.schemas.user import UserResponse
from models.enums import UserRole
from models.user import User

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
    dependencies=[Depends(validate_token)],
)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current authenticated user information."""
    return UserResponse.model_validate(current_user)


@router.get("/", response_model=ResponseSchema)
async def list_users(
    role: Optional[UserRole] = Query(None, description="Only users holding this role"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List active users of the caller's tenant, e.g. candidates for a lead slot."""
    users = await UserService(db, current_user.tenant_id).list_users(role=role)
    return ResponseSchema(
        status="success",
        message="Users retrieved successfully",
        data=[UserResponse.model_validate(u).model_dump(mode="json") for u in users],
    )
