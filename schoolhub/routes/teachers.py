from typing import List

from fastapi import APIRouter, Depends, File, Path, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.database import get_db
from schoolhub.core.dependencies import delete_ids, get_caller_context, list_params
from schoolhub.core.scope import CallerContext
from schoolhub.schemas.common import DeleteResponse, ListResponse
from schoolhub.schemas.teacher import TeacherCreateRequest, TeacherResponse, TeacherUpdateRequest
from schoolhub.services.base_service import ListParams
from schoolhub.services.teacher_service import TeacherService
from schoolhub.services.storage_service import StorageService, get_storage, read_image

router = APIRouter(
    prefix="/api/teachers",
    tags=["Teachers"],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not found"}
    }
)


def get_teacher_service(
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage)
) -> TeacherService:
    return TeacherService(db, storage)


@router.get("", response_model=ListResponse[TeacherResponse])
async def list_teachers(
    params: ListParams = Depends(list_params),
    ctx: CallerContext = Depends(get_caller_context),
    service: TeacherService = Depends(get_teacher_service)
):
    teachers, total = await service.list(ctx, params)
    return ListResponse[TeacherResponse](
        data=[TeacherResponse.model_validate(t) for t in teachers],
        total=total
    )


@router.post("", response_model=TeacherResponse, status_code=status.HTTP_201_CREATED)
async def create_teacher(
    data: TeacherCreateRequest,
    ctx: CallerContext = Depends(get_caller_context),
    service: TeacherService = Depends(get_teacher_service)
):
    """Register a teacher, optionally assigning existing subjects."""
    return await service.create(ctx, data)


@router.delete("", response_model=DeleteResponse)
async def delete_teachers(
    ids: List[int] = Depends(delete_ids),
    ctx: CallerContext = Depends(get_caller_context),
    service: TeacherService = Depends(get_teacher_service)
):
    return await service.delete_many(ctx, ids)


@router.get("/{teacher_id}", response_model=TeacherResponse)
async def get_teacher(
    teacher_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: TeacherService = Depends(get_teacher_service)
):
    return await service.get(ctx, teacher_id)


@router.put("/{teacher_id}", response_model=TeacherResponse)
async def update_teacher(
    data: TeacherUpdateRequest,
    teacher_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: TeacherService = Depends(get_teacher_service)
):
    return await service.update(ctx, teacher_id, data)


@router.delete("/{teacher_id}", response_model=DeleteResponse)
async def delete_teacher(
    teacher_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: TeacherService = Depends(get_teacher_service)
):
    return await service.delete_many(ctx, [teacher_id])


@router.put("/{teacher_id}/avatar", response_model=TeacherResponse)
async def upload_teacher_avatar(
    teacher_id: int = Path(..., ge=1),
    file: UploadFile = File(...),
    ctx: CallerContext = Depends(get_caller_context),
    service: TeacherService = Depends(get_teacher_service)
):
    content = await read_image(file)
    return await service.replace_file(ctx, teacher_id, content, file.filename, "avatars")
