# schoolhub/services/lesson_service.py
from typing import List, Optional, Tuple

from schoolhub.core.errors import PermissionDenied, ValidationError
from schoolhub.core.permissions import Action, Resource
from schoolhub.core.scope import CallerContext, resolve_scope, resolve_target_school
from schoolhub.models import Class, Lesson, Subject, Teacher
from schoolhub.schemas.enums import Weekday
from schoolhub.schemas.lesson import LessonCreateRequest, LessonUpdateRequest
from schoolhub.services.base_service import BaseService, ListParams


class LessonService(BaseService):
    model = Lesson
    resource = Resource.LESSONS
    label = "Lesson"
    search_fields = ("name",)

    def ordering(self):
        return (Lesson.day, Lesson.start_time, Lesson.id)

    async def list_lessons(
        self,
        ctx: CallerContext,
        params: ListParams,
        day: Optional[Weekday] = None,
        class_id: Optional[int] = None,
        teacher_id: Optional[int] = None,
        subject_id: Optional[int] = None
    ) -> Tuple[List[Lesson], int]:
        filters = []
        if day is not None:
            filters.append(Lesson.day == day)
        if class_id is not None:
            filters.append(Lesson.class_id == class_id)
        if teacher_id is not None:
            filters.append(Lesson.teacher_id == teacher_id)
        if subject_id is not None:
            filters.append(Lesson.subject_id == subject_id)
        return await self.list(ctx, params, filters)

    async def _check_references(self, school_id: int, class_id=None, subject_id=None, teacher_id=None) -> None:
        if class_id is not None:
            await self.get_in_school(Class, class_id, school_id, "Class", "class_id")
        if subject_id is not None:
            await self.get_in_school(Subject, subject_id, school_id, "Subject", "subject_id")
        if teacher_id is not None:
            await self.get_in_school(Teacher, teacher_id, school_id, "Teacher", "teacher_id")

    async def create(self, ctx: CallerContext, data: LessonCreateRequest) -> Lesson:
        resolve_scope(ctx, self.resource, Action.CREATE)
        school_id = resolve_target_school(ctx, data.school_id)
        await self.get_school(school_id)
        await self._check_references(school_id, data.class_id, data.subject_id, data.teacher_id)
        return await self.save(Lesson(**data.model_dump(exclude={"school_id"}), school_id=school_id))

    async def update(self, ctx: CallerContext, lesson_id: int, data: LessonUpdateRequest) -> Lesson:
        scope = resolve_scope(ctx, self.resource, Action.UPDATE)
        lesson = await self.get(ctx, lesson_id, Action.UPDATE)
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}

        start = changes.get("start_time", lesson.start_time)
        end = changes.get("end_time", lesson.end_time)
        if end <= start:
            raise ValidationError(
                "End time must be after start time",
                details=[{"field": "end_time", "message": "End time must be after start time"}]
            )

        await self._check_references(
            lesson.school_id,
            changes.get("class_id"),
            changes.get("subject_id"),
            changes.get("teacher_id")
        )
        if "teacher_id" in changes and not scope.permits(teacher_id=changes["teacher_id"]):
            raise PermissionDenied("You can only manage your own lessons")

        self.apply_changes(lesson, changes)
        return await self.save(lesson)
