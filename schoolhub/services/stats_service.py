# schoolhub/services/stats_service.py
"""
Dashboard statistics.

Every figure is computed through the caller's read scope, so a teacher's ``lessons`` count
is their own lessons and a parent's ``students`` count is their children.
"""
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.errors import PermissionDenied
from schoolhub.core.permissions import Resource
from schoolhub.core.scope import CallerContext, resolve_scope
from schoolhub.models import (
    AcademicTerm, Administration, Announcement, Attendance, Class, Event, Grade, Lesson,
    NewsPost, Parent, School, Student, Subject, Teacher,
)
from schoolhub.schemas.stats import ActivityItem, AttendanceDay, GenderCount, StatsResponse
from schoolhub.schemas.term import TermResponse
from schoolhub.services.term_service import TermService

NO_SCHOOL_FOR_STATS = "No school associated with user. Cannot fetch school-specific statistics."

COUNTED = (
    ("schools", Resource.SCHOOLS, School),
    ("administrations", Resource.ADMINISTRATIONS, Administration),
    ("teachers", Resource.TEACHERS, Teacher),
    ("students", Resource.STUDENTS, Student),
    ("parents", Resource.PARENTS, Parent),
    ("classes", Resource.CLASSES, Class),
    ("subjects", Resource.SUBJECTS, Subject),
    ("lessons", Resource.LESSONS, Lesson),
    ("grades", Resource.GRADES, Grade),
    ("terms", Resource.TERMS, AcademicTerm),
    ("events", Resource.EVENTS, Event),
    ("announcements", Resource.ANNOUNCEMENTS, Announcement),
    ("news", Resource.NEWS, NewsPost),
    ("attendance", Resource.ATTENDANCE, Attendance),
)

RECENT_DAYS = 30
ATTENDANCE_DAYS = 7
RECENT_ANNOUNCEMENTS = 3
RECENT_EVENTS = 5


class StatsService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _count(self, ctx: CallerContext, resource: Resource, model, *where) -> int:
        scope = resolve_scope(ctx, resource)
        if scope.empty:
            return 0
        stmt = scope.apply(select(func.count(model.id)), model)
        for clause in where:
            stmt = stmt.where(clause)
        return await self.db.scalar(stmt) or 0

    async def counts(self, ctx: CallerContext) -> Dict[str, int]:
        return {key: await self._count(ctx, resource, model) for key, resource, model in COUNTED}

    async def recent(self, ctx: CallerContext) -> Dict[str, int]:
        since = datetime.now(timezone.utc) - timedelta(days=RECENT_DAYS)
        return {
            "students": await self._count(ctx, Resource.STUDENTS, Student, Student.created_at >= since),
            "teachers": await self._count(ctx, Resource.TEACHERS, Teacher, Teacher.created_at >= since),
        }

    async def students_by_gender(self, ctx: CallerContext) -> List[GenderCount]:
        scope = resolve_scope(ctx, Resource.STUDENTS)
        if scope.empty:
            return []
        stmt = scope.apply(
            select(Student.gender, func.count(Student.id)).group_by(Student.gender), Student
        )
        result = await self.db.execute(stmt.order_by(Student.gender))
        return [GenderCount(gender=gender, count=count) for gender, count in result.all()]

    async def attendance(self, ctx: CallerContext, today: date) -> List[AttendanceDay]:
        """Present and absent marks for each of the last seven days, oldest first."""
        days = [today - timedelta(days=offset) for offset in range(ATTENDANCE_DAYS - 1, -1, -1)]
        totals = {day: AttendanceDay(date=day) for day in days}

        scope = resolve_scope(ctx, Resource.ATTENDANCE)
        if not scope.empty:
            stmt = scope.apply(
                select(Attendance.date, Attendance.present, func.count(Attendance.id))
                .where(Attendance.date >= days[0], Attendance.date <= today)
                .group_by(Attendance.date, Attendance.present),
                Attendance
            )
            for day, present, count in (await self.db.execute(stmt)).all():
                if present:
                    totals[day].present += count
                else:
                    totals[day].absent += count
        return [totals[day] for day in days]

    async def _latest(self, ctx: CallerContext, resource: Resource, model, order_by, limit: int) -> List:
        scope = resolve_scope(ctx, resource)
        if scope.empty:
            return []
        stmt = scope.apply(select(model), model).order_by(order_by.desc(), model.id.desc()).limit(limit)
        return list((await self.db.execute(stmt)).scalars().all())

    async def overview(self, ctx: CallerContext) -> StatsResponse:
        if not ctx.is_super and not ctx.school_ids:
            raise PermissionDenied(NO_SCHOOL_FOR_STATS)

        term = await TermService(self.db).current(ctx)
        announcements = await self._latest(
            ctx, Resource.ANNOUNCEMENTS, Announcement, Announcement.date, RECENT_ANNOUNCEMENTS
        )
        events = await self._latest(ctx, Resource.EVENTS, Event, Event.start_time, RECENT_EVENTS)

        return StatsResponse(
            role=ctx.role,
            counts=await self.counts(ctx),
            recent=await self.recent(ctx),
            students_by_gender=await self.students_by_gender(ctx),
            attendance=await self.attendance(ctx, date.today()),
            current_term=TermResponse.model_validate(term) if term else None,
            announcements=[ActivityItem.model_validate(a) for a in announcements],
            events=[
                ActivityItem(
                    id=e.id, title=e.title, date=e.start_time, class_id=e.class_id, school_id=e.school_id
                )
                for e in events
            ],
            generated_at=datetime.now(timezone.utc),
        )
