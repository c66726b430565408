from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.database import get_db
from schoolhub.core.dependencies import delete_ids, get_caller_context, list_params
from schoolhub.core.scope import CallerContext
from schoolhub.schemas.attendance import AttendanceMarkRequest, AttendanceResponse, AttendanceUpdateRequest
from schoolhub.schemas.common import DeleteResponse, ListResponse
from schoolhub.services.attendance_service import AttendanceService
from schoolhub.services.base_service import ListParams

router = APIRouter(
    prefix="/api/attendance",
    tags=["Attendance"],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not found"}
    }
)


def get_attendance_service(db: AsyncSession = Depends(get_db)) -> AttendanceService:
    return AttendanceService(db)


@router.get("", response_model=ListResponse[AttendanceResponse])
async def list_attendance(
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    student_id: Optional[int] = Query(None),
    class_id: Optional[int] = Query(None),
    params: ListParams = Depends(list_params),
    ctx: CallerContext = Depends(get_caller_context),
    service: AttendanceService = Depends(get_attendance_service)
):
    records, total = await service.list_attendance(ctx, params, date_from, date_to, student_id, class_id)
    return ListResponse[AttendanceResponse](
        data=[AttendanceResponse.model_validate(r) for r in records],
        total=total
    )


@router.post(
    "",
    response_model=AttendanceResponse,
    status_code=status.HTTP_201_CREATED,
    responses={200: {"description": "Existing record updated"}}
)
async def mark_attendance(
    data: AttendanceMarkRequest,
    response: Response,
    ctx: CallerContext = Depends(get_caller_context),
    service: AttendanceService = Depends(get_attendance_service)
):
    """Create the day's record for a student, or update it when one exists."""
    record, created = await service.mark(ctx, data)
    if not created:
        response.status_code = status.HTTP_200_OK
    return record


@router.delete("", response_model=DeleteResponse)
async def delete_attendance_records(
    ids: List[int] = Depends(delete_ids),
    ctx: CallerContext = Depends(get_caller_context),
    service: AttendanceService = Depends(get_attendance_service)
):
    return await service.delete_many(ctx, ids)


@router.get("/{record_id}", response_model=AttendanceResponse)
async def get_attendance_record(
    record_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: AttendanceService = Depends(get_attendance_service)
):
    return await service.get(ctx, record_id)


@router.put("/{record_id}", response_model=AttendanceResponse)
async def update_attendance_record(
    data: AttendanceUpdateRequest,
    record_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: AttendanceService = Depends(get_attendance_service)
):
    return await service.update(ctx, record_id, data)


@router.delete("/{record_id}", response_model=DeleteResponse)
async def delete_attendance_record(
    record_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: AttendanceService = Depends(get_attendance_service)
):
    return await service.delete_many(ctx, [record_id])
