from typing import List, Optional

from fastapi import APIRouter, Depends, File, Path, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.database import get_db
from schoolhub.core.dependencies import delete_ids, get_caller_context, list_params
from schoolhub.core.scope import CallerContext
from schoolhub.schemas.common import DeleteResponse, ListResponse
from schoolhub.schemas.student import StudentCreateRequest, StudentResponse, StudentUpdateRequest
from schoolhub.services.base_service import ListParams
from schoolhub.services.storage_service import StorageService, get_storage, read_image
from schoolhub.services.student_service import StudentService

router = APIRouter(
    prefix="/api/students",
    tags=["Students"],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not found"}
    }
)


def get_student_service(
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage)
) -> StudentService:
    return StudentService(db, storage)


@router.get("", response_model=ListResponse[StudentResponse])
async def list_students(
    class_id: Optional[int] = Query(None),
    parent_id: Optional[int] = Query(None),
    params: ListParams = Depends(list_params),
    ctx: CallerContext = Depends(get_caller_context),
    service: StudentService = Depends(get_student_service)
):
    students, total = await service.list_students(ctx, params, class_id, parent_id)
    return ListResponse[StudentResponse](
        data=[StudentResponse.model_validate(s) for s in students],
        total=total
    )


@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
async def create_student(
    data: StudentCreateRequest,
    ctx: CallerContext = Depends(get_caller_context),
    service: StudentService = Depends(get_student_service)
):
    """Admit a student; the admission number is generated from the school's prefix."""
    return await service.create(ctx, data)


@router.delete("", response_model=DeleteResponse)
async def delete_students(
    ids: List[int] = Depends(delete_ids),
    ctx: CallerContext = Depends(get_caller_context),
    service: StudentService = Depends(get_student_service)
):
    return await service.delete_many(ctx, ids)


@router.get("/{student_id}", response_model=StudentResponse)
async def get_student(
    student_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: StudentService = Depends(get_student_service)
):
    return await service.get(ctx, student_id)


@router.put("/{student_id}", response_model=StudentResponse)
async def update_student(
    data: StudentUpdateRequest,
    student_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: StudentService = Depends(get_student_service)
):
    return await service.update(ctx, student_id, data)


@router.delete("/{student_id}", response_model=DeleteResponse)
async def delete_student(
    student_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: StudentService = Depends(get_student_service)
):
    return await service.delete_many(ctx, [student_id])


@router.put("/{student_id}/avatar", response_model=StudentResponse)
async def upload_student_avatar(
    student_id: int = Path(..., ge=1),
    file: UploadFile = File(...),
    ctx: CallerContext = Depends(get_caller_context),
    service: StudentService = Depends(get_student_service)
):
    content = await read_image(file)
    return await service.replace_file(ctx, student_id, content, file.filename, "avatars")
