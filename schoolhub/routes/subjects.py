from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.database import get_db
from schoolhub.core.dependencies import delete_ids, get_caller_context, list_params
from schoolhub.core.scope import CallerContext
from schoolhub.schemas.common import DeleteResponse, ListResponse
from schoolhub.schemas.subject import SubjectCreateRequest, SubjectResponse, SubjectUpdateRequest
from schoolhub.services.base_service import ListParams
from schoolhub.services.subject_service import SubjectService

router = APIRouter(
    prefix="/api/subjects",
    tags=["Subjects"],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not found"}
    }
)


def get_subject_service(db: AsyncSession = Depends(get_db)) -> SubjectService:
    return SubjectService(db)


@router.get("", response_model=ListResponse[SubjectResponse])
async def list_subjects(
    category: Optional[str] = Query(None),
    teacher_id: Optional[int] = Query(None),
    params: ListParams = Depends(list_params),
    ctx: CallerContext = Depends(get_caller_context),
    service: SubjectService = Depends(get_subject_service)
):
    subjects, total = await service.list_subjects(ctx, params, category, teacher_id)
    return ListResponse[SubjectResponse](
        data=[SubjectResponse.model_validate(s) for s in subjects],
        total=total
    )


@router.post("", response_model=SubjectResponse, status_code=status.HTTP_201_CREATED)
async def create_subject(
    data: SubjectCreateRequest,
    ctx: CallerContext = Depends(get_caller_context),
    service: SubjectService = Depends(get_subject_service)
):
    return await service.create(ctx, data)


@router.delete("", response_model=DeleteResponse)
async def delete_subjects(
    ids: List[int] = Depends(delete_ids),
    ctx: CallerContext = Depends(get_caller_context),
    service: SubjectService = Depends(get_subject_service)
):
    return await service.delete_many(ctx, ids)


@router.get("/{subject_id}", response_model=SubjectResponse)
async def get_subject(
    subject_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: SubjectService = Depends(get_subject_service)
):
    return await service.get(ctx, subject_id)


@router.put("/{subject_id}", response_model=SubjectResponse)
async def update_subject(
    data: SubjectUpdateRequest,
    subject_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: SubjectService = Depends(get_subject_service)
):
    return await service.update(ctx, subject_id, data)


@router.delete("/{subject_id}", response_model=DeleteResponse)
async def delete_subject(
    subject_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: SubjectService = Depends(get_subject_service)
):
    return await service.delete_many(ctx, [subject_id])
