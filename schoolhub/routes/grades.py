from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.database import get_db
from schoolhub.core.dependencies import delete_ids, get_caller_context, list_params
from schoolhub.core.scope import CallerContext
from schoolhub.schemas.common import DeleteResponse, ListResponse
from schoolhub.schemas.grade import GradeCreateRequest, GradeResponse, GradeUpdateRequest
from schoolhub.schemas.enums import Term
from schoolhub.services.base_service import ListParams
from schoolhub.services.grade_service import GradeService

router = APIRouter(
    prefix="/api/grades",
    tags=["Grades"],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not found"}
    }
)


def get_grade_service(db: AsyncSession = Depends(get_db)) -> GradeService:
    return GradeService(db)


@router.get("", response_model=ListResponse[GradeResponse])
async def list_grades(
    term: Optional[Term] = Query(None),
    session: Optional[str] = Query(None, examples=["2024/2025"]),
    published: Optional[bool] = Query(None),
    params: ListParams = Depends(list_params),
    ctx: CallerContext = Depends(get_caller_context),
    service: GradeService = Depends(get_grade_service)
):
    grades, total = await service.list_grades(ctx, params, term, session, published)
    return ListResponse[GradeResponse](
        data=[GradeResponse.model_validate(g) for g in grades],
        total=total
    )


@router.post("", response_model=GradeResponse, status_code=status.HTTP_201_CREATED)
async def create_grade(
    data: GradeCreateRequest,
    ctx: CallerContext = Depends(get_caller_context),
    service: GradeService = Depends(get_grade_service)
):
    return await service.create(ctx, data)


@router.delete("", response_model=DeleteResponse)
async def delete_grades(
    ids: List[int] = Depends(delete_ids),
    ctx: CallerContext = Depends(get_caller_context),
    service: GradeService = Depends(get_grade_service)
):
    return await service.delete_many(ctx, ids)


@router.get("/{grade_id}", response_model=GradeResponse)
async def get_grade(
    grade_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: GradeService = Depends(get_grade_service)
):
    return await service.get(ctx, grade_id)


@router.put("/{grade_id}", response_model=GradeResponse)
async def update_grade(
    data: GradeUpdateRequest,
    grade_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: GradeService = Depends(get_grade_service)
):
    return await service.update(ctx, grade_id, data)


@router.delete("/{grade_id}", response_model=DeleteResponse)
async def delete_grade(
    grade_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: GradeService = Depends(get_grade_service)
):
    return await service.delete_many(ctx, [grade_id])
