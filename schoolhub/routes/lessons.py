from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.database import get_db
from schoolhub.core.dependencies import delete_ids, get_caller_context, list_params
from schoolhub.core.scope import CallerContext
from schoolhub.schemas.common import DeleteResponse, ListResponse
from schoolhub.schemas.lesson import LessonCreateRequest, LessonResponse, LessonUpdateRequest
from schoolhub.schemas.enums import Weekday
from schoolhub.services.base_service import ListParams
from schoolhub.services.lesson_service import LessonService

router = APIRouter(
    prefix="/api/lessons",
    tags=["Lessons"],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not found"}
    }
)


def get_lesson_service(db: AsyncSession = Depends(get_db)) -> LessonService:
    return LessonService(db)


@router.get("", response_model=ListResponse[LessonResponse])
async def list_lessons(
    day: Optional[Weekday] = Query(None),
    class_id: Optional[int] = Query(None),
    teacher_id: Optional[int] = Query(None),
    subject_id: Optional[int] = Query(None),
    params: ListParams = Depends(list_params),
    ctx: CallerContext = Depends(get_caller_context),
    service: LessonService = Depends(get_lesson_service)
):
    """Timetable entries ordered by day and start time."""
    lessons, total = await service.list_lessons(ctx, params, day, class_id, teacher_id, subject_id)
    return ListResponse[LessonResponse](
        data=[LessonResponse.model_validate(lesson) for lesson in lessons],
        total=total
    )


@router.post("", response_model=LessonResponse, status_code=status.HTTP_201_CREATED)
async def create_lesson(
    data: LessonCreateRequest,
    ctx: CallerContext = Depends(get_caller_context),
    service: LessonService = Depends(get_lesson_service)
):
    return await service.create(ctx, data)


@router.delete("", response_model=DeleteResponse)
async def delete_lessons(
    ids: List[int] = Depends(delete_ids),
    ctx: CallerContext = Depends(get_caller_context),
    service: LessonService = Depends(get_lesson_service)
):
    return await service.delete_many(ctx, ids)


@router.get("/{lesson_id}", response_model=LessonResponse)
async def get_lesson(
    lesson_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: LessonService = Depends(get_lesson_service)
):
    return await service.get(ctx, lesson_id)


@router.put("/{lesson_id}", response_model=LessonResponse)
async def update_lesson(
    data: LessonUpdateRequest,
    lesson_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: LessonService = Depends(get_lesson_service)
):
    return await service.update(ctx, lesson_id, data)


@router.delete("/{lesson_id}", response_model=DeleteResponse)
async def delete_lesson(
    lesson_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: LessonService = Depends(get_lesson_service)
):
    return await service.delete_many(ctx, [lesson_id])
