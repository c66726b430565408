from typing import List, Optional

from fastapi import APIRouter, Depends, File, Path, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.database import get_db
from schoolhub.core.dependencies import delete_ids, get_caller_context, list_params
from schoolhub.core.scope import CallerContext
from schoolhub.schemas.administration import (
    AdministrationCreateRequest, AdministrationResponse, AdministrationUpdateRequest,
)
from schoolhub.schemas.common import DeleteResponse, ListResponse
from schoolhub.schemas.enums import AdminRole
from schoolhub.services.administration_service import AdministrationService
from schoolhub.services.base_service import ListParams
from schoolhub.services.storage_service import StorageService, get_storage, read_image

router = APIRouter(
    prefix="/api/administrations",
    tags=["Administrations"],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not found"}
    }
)


def get_administration_service(
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage)
) -> AdministrationService:
    return AdministrationService(db, storage)


@router.get("", response_model=ListResponse[AdministrationResponse])
async def list_administrations(
    role: Optional[AdminRole] = Query(None),
    params: ListParams = Depends(list_params),
    ctx: CallerContext = Depends(get_caller_context),
    service: AdministrationService = Depends(get_administration_service)
):
    admins, total = await service.list_administrations(ctx, params, role)
    return ListResponse[AdministrationResponse](
        data=[AdministrationResponse.model_validate(a) for a in admins],
        total=total
    )


@router.post("", response_model=AdministrationResponse, status_code=status.HTTP_201_CREATED)
async def create_administration(
    data: AdministrationCreateRequest,
    ctx: CallerContext = Depends(get_caller_context),
    service: AdministrationService = Depends(get_administration_service)
):
    return await service.create(ctx, data)


@router.delete("", response_model=DeleteResponse)
async def delete_administrations(
    ids: List[int] = Depends(delete_ids),
    ctx: CallerContext = Depends(get_caller_context),
    service: AdministrationService = Depends(get_administration_service)
):
    """Delete several administration records; the caller's own record is never deleted."""
    return await service.delete_many(ctx, ids)


@router.get("/{admin_id}", response_model=AdministrationResponse)
async def get_administration(
    admin_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: AdministrationService = Depends(get_administration_service)
):
    return await service.get(ctx, admin_id)


@router.put("/{admin_id}", response_model=AdministrationResponse)
async def update_administration(
    data: AdministrationUpdateRequest,
    admin_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: AdministrationService = Depends(get_administration_service)
):
    return await service.update(ctx, admin_id, data)


@router.delete("/{admin_id}", response_model=DeleteResponse)
async def delete_administration(
    admin_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: AdministrationService = Depends(get_administration_service)
):
    return await service.delete_many(ctx, [admin_id])


@router.put("/{admin_id}/avatar", response_model=AdministrationResponse)
async def upload_administration_avatar(
    admin_id: int = Path(..., ge=1),
    file: UploadFile = File(...),
    ctx: CallerContext = Depends(get_caller_context),
    service: AdministrationService = Depends(get_administration_service)
):
    content = await read_image(file)
    return await service.replace_file(ctx, admin_id, content, file.filename, "avatars")
