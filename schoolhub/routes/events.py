from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.database import get_db
from schoolhub.core.dependencies import delete_ids, get_caller_context, list_params
from schoolhub.core.scope import CallerContext
from schoolhub.schemas.common import DeleteResponse, ListResponse
from schoolhub.schemas.event import EventCreateRequest, EventResponse, EventUpdateRequest
from schoolhub.services.base_service import ListParams
from schoolhub.services.event_service import EventService

router = APIRouter(
    prefix="/api/events",
    tags=["Events"],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not found"}
    }
)


def get_event_service(db: AsyncSession = Depends(get_db)) -> EventService:
    return EventService(db)


@router.get("", response_model=ListResponse[EventResponse])
async def list_events(
    class_id: Optional[int] = Query(None),
    date_from: Optional[datetime] = Query(None, alias="from"),
    date_to: Optional[datetime] = Query(None, alias="to"),
    params: ListParams = Depends(list_params),
    ctx: CallerContext = Depends(get_caller_context),
    service: EventService = Depends(get_event_service)
):
    items, total = await service.list_bulletins(ctx, params, class_id, date_from, date_to)
    return ListResponse[EventResponse](
        data=[EventResponse.model_validate(item) for item in items],
        total=total
    )


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    data: EventCreateRequest,
    ctx: CallerContext = Depends(get_caller_context),
    service: EventService = Depends(get_event_service)
):
    return await service.create(ctx, data)


@router.delete("", response_model=DeleteResponse)
async def delete_events(
    ids: List[int] = Depends(delete_ids),
    ctx: CallerContext = Depends(get_caller_context),
    service: EventService = Depends(get_event_service)
):
    return await service.delete_many(ctx, ids)


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: EventService = Depends(get_event_service)
):
    return await service.get(ctx, event_id)


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    data: EventUpdateRequest,
    event_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: EventService = Depends(get_event_service)
):
    return await service.update(ctx, event_id, data)


@router.delete("/{event_id}", response_model=DeleteResponse)
async def delete_event(
    event_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: EventService = Depends(get_event_service)
):
    return await service.delete_many(ctx, [event_id])
