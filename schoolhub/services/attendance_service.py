# schoolhub/services/attendance_service.py
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy import select

from schoolhub.core.errors import PermissionDenied, ValidationError
from schoolhub.core.permissions import Action, Resource
from schoolhub.core.scope import CallerContext, resolve_scope
from schoolhub.models import Attendance, Student
from schoolhub.schemas.attendance import AttendanceMarkRequest, AttendanceUpdateRequest
from schoolhub.services.base_service import BaseService, ListParams


class AttendanceService(BaseService):
    model = Attendance
    resource = Resource.ATTENDANCE
    label = "Attendance record"

    def ordering(self):
        return (Attendance.date.desc(), Attendance.id.desc())

    async def list_attendance(
        self,
        ctx: CallerContext,
        params: ListParams,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        student_id: Optional[int] = None,
        class_id: Optional[int] = None
    ) -> Tuple[List[Attendance], int]:
        filters = []
        if date_from is not None:
            filters.append(Attendance.date >= date_from)
        if date_to is not None:
            filters.append(Attendance.date <= date_to)
        if student_id is not None:
            filters.append(Attendance.student_id == student_id)
        if class_id is not None:
            filters.append(Attendance.student_id.in_(
                select(Student.id).where(Student.class_id == class_id)
            ))
        return await self.list(ctx, params, filters)

    async def mark(self, ctx: CallerContext, data: AttendanceMarkRequest) -> Tuple[Attendance, bool]:
        """Record a student's presence for a day; returns the row and whether it is new."""
        scope = resolve_scope(ctx, self.resource, Action.CREATE)

        student = await self.db.get(Student, data.student_id)
        if student is None or (data.school_id is not None and student.school_id != data.school_id):
            raise ValidationError(
                "Student not found",
                details=[{"field": "student_id", "message": f"Student {data.student_id} not found"}]
            )
        if not scope.permits(school_id=student.school_id, student_id=student.id):
            raise PermissionDenied("Access denied - student is outside your scope")

        record = await self.db.scalar(
            select(Attendance).where(Attendance.student_id == student.id, Attendance.date == data.date)
        )
        if record is not None:
            record.present = data.present
            return await self.save(record), False

        record = Attendance(
            student_id=student.id,
            school_id=student.school_id,
            date=data.date,
            present=data.present,
        )
        return await self.save(record), True

    async def update(self, ctx: CallerContext, record_id: int, data: AttendanceUpdateRequest) -> Attendance:
        record = await self.get(ctx, record_id, Action.UPDATE)
        record.present = data.present
        return await self.save(record)
