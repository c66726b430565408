from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.database import get_db
from schoolhub.core.dependencies import delete_ids, get_caller_context, list_params
from schoolhub.core.scope import CallerContext
from schoolhub.schemas.common import DeleteResponse, ListResponse
from schoolhub.schemas.enums import NewsCategory, NewsStatus
from schoolhub.schemas.news import NewsCreateRequest, NewsResponse, NewsUpdateRequest
from schoolhub.services.base_service import ListParams
from schoolhub.services.news_service import NewsService

router = APIRouter(
    prefix="/api/news",
    tags=["News"],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not found"}
    }
)


def get_news_service(db: AsyncSession = Depends(get_db)) -> NewsService:
    return NewsService(db)


@router.get("", response_model=ListResponse[NewsResponse])
async def list_news(
    category: Optional[NewsCategory] = Query(None),
    post_status: Optional[NewsStatus] = Query(None, alias="status"),
    featured: Optional[bool] = Query(None),
    params: ListParams = Depends(list_params),
    ctx: CallerContext = Depends(get_caller_context),
    service: NewsService = Depends(get_news_service)
):
    """Newest published first; unpublished posts last."""
    posts, total = await service.list_news(ctx, params, category, post_status, featured)
    return ListResponse[NewsResponse](
        data=[NewsResponse.model_validate(p) for p in posts],
        total=total
    )


@router.post("", response_model=NewsResponse, status_code=status.HTTP_201_CREATED)
async def create_news(
    data: NewsCreateRequest,
    ctx: CallerContext = Depends(get_caller_context),
    service: NewsService = Depends(get_news_service)
):
    return await service.create(ctx, data)


@router.delete("", response_model=DeleteResponse)
async def delete_news_posts(
    ids: List[int] = Depends(delete_ids),
    ctx: CallerContext = Depends(get_caller_context),
    service: NewsService = Depends(get_news_service)
):
    return await service.delete_many(ctx, ids)


@router.get("/{post_id}", response_model=NewsResponse)
async def get_news(
    post_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: NewsService = Depends(get_news_service)
):
    return await service.get(ctx, post_id)


@router.put("/{post_id}", response_model=NewsResponse)
async def update_news(
    data: NewsUpdateRequest,
    post_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: NewsService = Depends(get_news_service)
):
    return await service.update(ctx, post_id, data)


@router.delete("/{post_id}", response_model=DeleteResponse)
async def delete_news(
    post_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: NewsService = Depends(get_news_service)
):
    return await service.delete_many(ctx, [post_id])
