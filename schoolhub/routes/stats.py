from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.database import get_db
from schoolhub.core.dependencies import get_caller_context
from schoolhub.core.scope import CallerContext
from schoolhub.schemas.stats import StatsResponse
from schoolhub.services.stats_service import StatsService

router = APIRouter(
    prefix="/api/stats",
    tags=["Stats"],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"}
    }
)


def get_stats_service(db: AsyncSession = Depends(get_db)) -> StatsService:
    return StatsService(db)


@router.get("", response_model=StatsResponse)
async def get_stats(
    ctx: CallerContext = Depends(get_caller_context),
    service: StatsService = Depends(get_stats_service)
):
    """Dashboard counts, charts and recent activity for the caller's role."""
    return await service.overview(ctx)
