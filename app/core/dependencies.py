# app/core/dependencies.py
import logging
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core.security import TokenAuthenticator
from app.database import get_db
from app.domains.lifecycle.permissions import Actor
from app.services.invalidation import InvalidationEmitter, get_invalidation_emitter
from models import User

logger = logging.getLogger(__name__)

security = HTTPBearer()
auth = TokenAuthenticator()


async def validate_token(token=Depends(security)) -> dict:
    """Validate and decode the bearer JWT.

    Returns:
        dict: Decoded token payload

    Raises:
        HTTPException: If token is invalid or expired
    """
    if not token or not token.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication token is required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return auth.verify_token(token.credentials)


async def get_current_user(
    request: Request,
    payload: dict = Depends(validate_token),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Get current authenticated user from JWT payload.

    Returns:
        User: Current authenticated user

    Raises:
        HTTPException: If user not found or inactive
    """
    try:
        user_id = UUID(str(payload.get("sub")))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload - missing user ID",
        )

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="User account is inactive"
        )

    # Add user info to request state for logging
    request.state.user_id = user.id
    request.state.tenant_id = user.tenant_id

    return user


async def get_current_actor(current_user: User = Depends(get_current_user)) -> Actor:
    """The caller as a session-independent value for the lifecycle services."""
    return Actor.from_user(current_user)


def get_emitter() -> InvalidationEmitter:
    return get_invalidation_emitter()
