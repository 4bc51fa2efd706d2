"""Batch operations API controller."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_current_actor, get_db, get_emitter, validate_token
from app.domains.batch.service import BatchService
from app.domains.lifecycle.permissions import Actor
from app.schemas.batch import BatchRequest, BatchResult
from app.services.invalidation import InvalidationEmitter

router = APIRouter(
    prefix="/api/projects",
    tags=["batch"],
    dependencies=[Depends(validate_token)],
)


@router.post("/batch", response_model=BatchResult)
async def batch_apply(
    request: BatchRequest,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
    emitter: InvalidationEmitter = Depends(get_emitter),
):
    """Apply one operation to many projects with per-item results.

    DELETE removes every listed project or none of them.
    """
    service = BatchService(db, actor, emitter)
    result = await service.apply(request)
    return BatchResult.model_validate(result)
