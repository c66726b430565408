# schoolhub/services/class_service.py
from typing import Dict, List, Optional, Tuple

from sqlalchemy import and_, delete, func, select

from schoolhub.core.permissions import Action, Resource
from schoolhub.core.scope import CallerContext, resolve_scope, resolve_target_school
from schoolhub.models import Announcement, Class, Event, Lesson, ReportCard, Student, StudentGrade, Teacher
from schoolhub.schemas.class_ import (
    ClassCreateRequest, ClassDetailResponse, ClassMember, ClassResponse, ClassUpdateRequest,
)
from schoolhub.schemas.common import BlockedItem
from schoolhub.services.base_service import BaseService, ListParams

DUPLICATE_MESSAGE = "Class with this name and category already exists"


class ClassService(BaseService):
    model = Class
    resource = Resource.CLASSES
    label = "Class"
    search_fields = ("name", "category", "level")
    blocked_message = "Cannot delete class(es) with students enrolled"

    async def list_classes(
        self,
        ctx: CallerContext,
        params: ListParams,
        category: Optional[str] = None,
        level: Optional[str] = None
    ) -> Tuple[List[ClassResponse], int]:
        filters = []
        if category:
            filters.append(Class.category == category)
        if level:
            filters.append(Class.level == level)
        classes, total = await self.list(ctx, params, filters)

        counts = await self.student_counts([c.id for c in classes])
        return [self.to_response(c, counts.get(c.id, 0)) for c in classes], total

    async def student_counts(self, class_ids: List[int]) -> Dict[int, int]:
        if not class_ids:
            return {}
        result = await self.db.execute(
            select(Student.class_id, func.count(Student.id))
            .where(Student.class_id.in_(class_ids))
            .group_by(Student.class_id)
        )
        return dict(result.all())

    @staticmethod
    def to_response(record: Class, student_count: int = 0) -> ClassResponse:
        return ClassResponse.model_validate(record).model_copy(update={"student_count": student_count})

    async def detail(self, ctx: CallerContext, class_id: int) -> ClassDetailResponse:
        record = await self.get(ctx, class_id)

        students = await self.db.execute(
            select(Student).where(Student.class_id == record.id).order_by(Student.surname, Student.firstname)
        )
        students = [ClassMember.model_validate(s) for s in students.scalars().all()]

        form_master = None
        if record.form_master_id is not None:
            teacher = await self.db.get(Teacher, record.form_master_id)
            form_master = ClassMember.model_validate(teacher) if teacher else None

        lesson_count = await self.db.scalar(
            select(func.count(Lesson.id)).where(Lesson.class_id == record.id)
        )
        return ClassDetailResponse(
            **ClassResponse.model_validate(record).model_dump(exclude={"student_count"}),
            student_count=len(students),
            form_master=form_master,
            students=students,
            lesson_count=lesson_count or 0,
        )

    async def _ensure_unique_name(
        self,
        school_id: int,
        name: str,
        category: str,
        exclude_id: Optional[int] = None
    ) -> None:
        await self.ensure_unique(
            [and_(
                Class.school_id == school_id,
                func.lower(Class.name) == name.lower(),
                func.lower(Class.category) == category.lower()
            )],
            DUPLICATE_MESSAGE,
            exclude_id=exclude_id
        )

    async def create(self, ctx: CallerContext, data: ClassCreateRequest) -> ClassResponse:
        resolve_scope(ctx, self.resource, Action.CREATE)
        school_id = resolve_target_school(ctx, data.school_id)
        await self.get_school(school_id)
        if data.form_master_id is not None:
            await self.get_in_school(Teacher, data.form_master_id, school_id, "Form master", "form_master_id")
        await self._ensure_unique_name(school_id, data.name, data.category)

        record = await self.save(Class(**data.model_dump(exclude={"school_id"}), school_id=school_id))
        return self.to_response(record)

    async def update(self, ctx: CallerContext, class_id: int, data: ClassUpdateRequest) -> ClassResponse:
        record = await self.get(ctx, class_id, Action.UPDATE)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("form_master_id") is not None:
            await self.get_in_school(
                Teacher, changes["form_master_id"], record.school_id, "Form master", "form_master_id"
            )
        if changes.get("name") or changes.get("category"):
            await self._ensure_unique_name(
                record.school_id,
                changes.get("name") or record.name,
                changes.get("category") or record.category,
                exclude_id=record.id
            )

        self.apply_changes(record, changes)
        record = await self.save(record)
        counts = await self.student_counts([record.id])
        return self.to_response(record, counts.get(record.id, 0))

    async def check_deletable(self, ctx: CallerContext, ids: List[int]) -> Tuple[List[int], List[BlockedItem]]:
        counts = await self.student_counts(ids)
        result = await self.db.execute(select(Class.id, Class.name, Class.category).where(Class.id.in_(ids)))
        names = {row.id: f"{row.name} {row.category}" for row in result.all()}

        deletable, blocked = [], []
        for class_id in ids:
            if counts.get(class_id):
                blocked.append(BlockedItem(
                    id=class_id,
                    name=names.get(class_id),
                    reason="Class has enrolled students",
                    students=counts[class_id]
                ))
            else:
                deletable.append(class_id)
        return deletable, blocked

    async def delete_dependents(self, ids: List[int]) -> Optional[Dict[str, int]]:
        cascaded = {}
        for key, model in (
            ("lessons", Lesson),
            ("events", Event),
            ("announcements", Announcement),
            ("student_grades", StudentGrade),
            ("report_cards", ReportCard),
        ):
            result = await self.db.execute(delete(model).where(model.class_id.in_(ids)))
            cascaded[key] = result.rowcount
        return cascaded
