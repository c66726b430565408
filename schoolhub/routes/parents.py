from typing import List, Optional

from fastapi import APIRouter, Depends, File, Path, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.database import get_db
from schoolhub.core.dependencies import delete_ids, get_caller_context, list_params
from schoolhub.core.scope import CallerContext
from schoolhub.schemas.common import DeleteResponse, ListResponse
from schoolhub.schemas.parent import ParentCreateRequest, ParentResponse, ParentUpdateRequest
from schoolhub.services.base_service import ListParams
from schoolhub.services.parent_service import ParentService
from schoolhub.services.storage_service import StorageService, get_storage, read_image

router = APIRouter(
    prefix="/api/parents",
    tags=["Parents"],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not found"}
    }
)


def get_parent_service(
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage)
) -> ParentService:
    return ParentService(db, storage)


@router.get("", response_model=ListResponse[ParentResponse])
async def list_parents(
    student_id: Optional[int] = Query(None, description="Only the parent of this student"),
    params: ListParams = Depends(list_params),
    ctx: CallerContext = Depends(get_caller_context),
    service: ParentService = Depends(get_parent_service)
):
    parents, total = await service.list_parents(ctx, params, student_id)
    return ListResponse[ParentResponse](
        data=[ParentResponse.model_validate(p) for p in parents],
        total=total
    )


@router.post("", response_model=ParentResponse, status_code=status.HTTP_201_CREATED)
async def create_parent(
    data: ParentCreateRequest,
    ctx: CallerContext = Depends(get_caller_context),
    service: ParentService = Depends(get_parent_service)
):
    return await service.create(ctx, data)


@router.delete("", response_model=DeleteResponse)
async def delete_parents(
    ids: List[int] = Depends(delete_ids),
    ctx: CallerContext = Depends(get_caller_context),
    service: ParentService = Depends(get_parent_service)
):
    return await service.delete_many(ctx, ids)


@router.get("/{parent_id}", response_model=ParentResponse)
async def get_parent(
    parent_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: ParentService = Depends(get_parent_service)
):
    return await service.get(ctx, parent_id)


@router.put("/{parent_id}", response_model=ParentResponse)
async def update_parent(
    data: ParentUpdateRequest,
    parent_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: ParentService = Depends(get_parent_service)
):
    return await service.update(ctx, parent_id, data)


@router.delete("/{parent_id}", response_model=DeleteResponse)
async def delete_parent(
    parent_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: ParentService = Depends(get_parent_service)
):
    return await service.delete_many(ctx, [parent_id])


@router.put("/{parent_id}/avatar", response_model=ParentResponse)
async def upload_parent_avatar(
    parent_id: int = Path(..., ge=1),
    file: UploadFile = File(...),
    ctx: CallerContext = Depends(get_caller_context),
    service: ParentService = Depends(get_parent_service)
):
    content = await read_image(file)
    return await service.replace_file(ctx, parent_id, content, file.filename, "avatars")
