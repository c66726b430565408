from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.database import get_db
from schoolhub.core.dependencies import delete_ids, get_caller_context, list_params
from schoolhub.core.scope import CallerContext
from schoolhub.schemas.common import DeleteResponse, ListResponse
from schoolhub.schemas.announcement import AnnouncementCreateRequest, AnnouncementResponse, AnnouncementUpdateRequest
from schoolhub.services.base_service import ListParams
from schoolhub.services.announcement_service import AnnouncementService

router = APIRouter(
    prefix="/api/announcements",
    tags=["Announcements"],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not found"}
    }
)


def get_announcement_service(db: AsyncSession = Depends(get_db)) -> AnnouncementService:
    return AnnouncementService(db)


@router.get("", response_model=ListResponse[AnnouncementResponse])
async def list_announcements(
    class_id: Optional[int] = Query(None),
    date_from: Optional[datetime] = Query(None, alias="from"),
    date_to: Optional[datetime] = Query(None, alias="to"),
    params: ListParams = Depends(list_params),
    ctx: CallerContext = Depends(get_caller_context),
    service: AnnouncementService = Depends(get_announcement_service)
):
    items, total = await service.list_bulletins(ctx, params, class_id, date_from, date_to)
    return ListResponse[AnnouncementResponse](
        data=[AnnouncementResponse.model_validate(item) for item in items],
        total=total
    )


@router.post("", response_model=AnnouncementResponse, status_code=status.HTTP_201_CREATED)
async def create_announcement(
    data: AnnouncementCreateRequest,
    ctx: CallerContext = Depends(get_caller_context),
    service: AnnouncementService = Depends(get_announcement_service)
):
    return await service.create(ctx, data)


@router.delete("", response_model=DeleteResponse)
async def delete_announcements(
    ids: List[int] = Depends(delete_ids),
    ctx: CallerContext = Depends(get_caller_context),
    service: AnnouncementService = Depends(get_announcement_service)
):
    return await service.delete_many(ctx, ids)


@router.get("/{announcement_id}", response_model=AnnouncementResponse)
async def get_announcement(
    announcement_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: AnnouncementService = Depends(get_announcement_service)
):
    return await service.get(ctx, announcement_id)


@router.put("/{announcement_id}", response_model=AnnouncementResponse)
async def update_announcement(
    data: AnnouncementUpdateRequest,
    announcement_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: AnnouncementService = Depends(get_announcement_service)
):
    return await service.update(ctx, announcement_id, data)


@router.delete("/{announcement_id}", response_model=DeleteResponse)
async def delete_announcement(
    announcement_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: AnnouncementService = Depends(get_announcement_service)
):
    return await service.delete_many(ctx, [announcement_id])
