"""Rankings API controller."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_current_actor, get_db, validate_token
from app.domains.lifecycle.permissions import Actor
from app.domains.ranking.service import RankingService
from app.schemas.base import ResponseSchema
from app.schemas.ranking import RankingEntry

router = APIRouter(
    prefix="/api/rankings",
    tags=["rankings"],
    dependencies=[Depends(validate_token)],
)


@router.get("/", response_model=ResponseSchema)
async def get_rankings(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Dev manager leaderboard for the caller's tenant."""
    rankings = await RankingService(db).get_dev_rankings(actor.tenant_id)
    return ResponseSchema(
        status="success",
        message="Rankings retrieved successfully",
        data=[RankingEntry.model_validate(r).model_dump(mode="json") for r in rankings],
    )
