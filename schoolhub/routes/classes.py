from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.database import get_db
from schoolhub.core.dependencies import delete_ids, get_caller_context, list_params
from schoolhub.core.scope import CallerContext
from schoolhub.schemas.class_ import ClassCreateRequest, ClassDetailResponse, ClassResponse, ClassUpdateRequest
from schoolhub.schemas.common import DeleteResponse, ListResponse
from schoolhub.services.base_service import ListParams
from schoolhub.services.class_service import ClassService

router = APIRouter(
    prefix="/api/classes",
    tags=["Classes"],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not found"}
    }
)


def get_class_service(db: AsyncSession = Depends(get_db)) -> ClassService:
    return ClassService(db)


@router.get("", response_model=ListResponse[ClassResponse])
async def list_classes(
    category: Optional[str] = Query(None),
    level: Optional[str] = Query(None),
    params: ListParams = Depends(list_params),
    ctx: CallerContext = Depends(get_caller_context),
    service: ClassService = Depends(get_class_service)
):
    classes, total = await service.list_classes(ctx, params, category, level)
    return ListResponse[ClassResponse](data=classes, total=total)


@router.post("", response_model=ClassResponse, status_code=status.HTTP_201_CREATED)
async def create_class(
    data: ClassCreateRequest,
    ctx: CallerContext = Depends(get_caller_context),
    service: ClassService = Depends(get_class_service)
):
    return await service.create(ctx, data)


@router.delete("", response_model=DeleteResponse)
async def delete_classes(
    ids: List[int] = Depends(delete_ids),
    ctx: CallerContext = Depends(get_caller_context),
    service: ClassService = Depends(get_class_service)
):
    """Delete classes; classes with enrolled students are reported under ``blocked``."""
    return await service.delete_many(ctx, ids)


@router.get("/{class_id}", response_model=ClassDetailResponse)
async def get_class(
    class_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: ClassService = Depends(get_class_service)
):
    return await service.detail(ctx, class_id)


@router.put("/{class_id}", response_model=ClassResponse)
async def update_class(
    data: ClassUpdateRequest,
    class_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: ClassService = Depends(get_class_service)
):
    return await service.update(ctx, class_id, data)


@router.delete("/{class_id}", response_model=DeleteResponse)
async def delete_class(
    class_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: ClassService = Depends(get_class_service)
):
    return await service.delete_many(ctx, [class_id])
