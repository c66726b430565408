# schoolhub/services/context_service.py
from typing import Iterable, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.errors import AuthenticationError
from schoolhub.core.scope import Caller, CallerContext
from schoolhub.models import Administration, Class, Lesson, Parent, Student, Teacher
from schoolhub.schemas.enums import Role


def _ids(values: Iterable) -> Tuple[int, ...]:
    return tuple(sorted({v for v in values if v is not None}))


class CallerContextService:
    """Loads the caller's record and the relations the scope calculator needs."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _column(self, stmt) -> Tuple[int, ...]:
        result = await self.db.execute(stmt)
        return _ids(result.scalars().all())

    async def load(self, caller: Caller) -> CallerContext:
        if caller.role.is_administrative:
            return await self._administration(caller)
        if caller.role is Role.TEACHER:
            return await self._teacher(caller)
        if caller.role is Role.STUDENT:
            return await self._student(caller)
        return await self._parent(caller)

    @staticmethod
    def _require(record):
        if record is None or not record.active:
            raise AuthenticationError("Session user no longer exists or is inactive")
        return record

    async def _administration(self, caller: Caller) -> CallerContext:
        admin = self._require(await self.db.get(Administration, caller.id))
        # the stored role is authoritative over the one embedded in the token
        return CallerContext(
            caller=Caller(id=admin.id, role=admin.role.to_role()),
            name=admin.username,
            school_ids=_ids([admin.school_id]),
        )

    async def _class_relations(self, class_ids: Tuple[int, ...]) -> Tuple[Tuple[int, ...], Tuple[int, ...]]:
        """Teachers and subjects of the given classes."""
        if not class_ids:
            return (), ()
        form_masters = await self._column(
            select(Class.form_master_id).where(Class.id.in_(class_ids))
        )
        lesson_rows = await self.db.execute(
            select(Lesson.teacher_id, Lesson.subject_id).where(Lesson.class_id.in_(class_ids))
        )
        lesson_rows = lesson_rows.all()
        teacher_ids = _ids(list(form_masters) + [row.teacher_id for row in lesson_rows])
        subject_ids = _ids(row.subject_id for row in lesson_rows)
        return teacher_ids, subject_ids

    async def _teacher(self, caller: Caller) -> CallerContext:
        teacher = self._require(await self.db.get(Teacher, caller.id))
        form_classes = await self._column(select(Class.id).where(Class.form_master_id == teacher.id))
        lesson_classes = await self._column(select(Lesson.class_id).where(Lesson.teacher_id == teacher.id))

        student_ids, parent_ids = (), ()
        if form_classes:
            roster = await self.db.execute(
                select(Student.id, Student.parent_id).where(Student.class_id.in_(form_classes))
            )
            roster = roster.all()
            student_ids = _ids(row.id for row in roster)
            parent_ids = _ids(row.parent_id for row in roster)

        return CallerContext(
            caller=caller,
            name=teacher.full_name,
            school_ids=_ids([teacher.school_id]),
            class_ids=form_classes,
            taught_class_ids=_ids(form_classes + lesson_classes),
            student_ids=student_ids,
            parent_ids=parent_ids,
            teacher_ids=(teacher.id,),
        )

    async def _student(self, caller: Caller) -> CallerContext:
        student = self._require(await self.db.get(Student, caller.id))
        class_ids = _ids([student.class_id])
        teacher_ids, subject_ids = await self._class_relations(class_ids)
        return CallerContext(
            caller=caller,
            name=student.full_name,
            school_ids=_ids([student.school_id]),
            class_ids=class_ids,
            taught_class_ids=class_ids,
            student_ids=(student.id,),
            parent_ids=_ids([student.parent_id]),
            teacher_ids=teacher_ids,
            subject_ids=subject_ids,
        )

    async def _parent(self, caller: Caller) -> CallerContext:
        parent = self._require(await self.db.get(Parent, caller.id))
        children = await self.db.execute(
            select(Student.id, Student.class_id, Student.school_id).where(Student.parent_id == parent.id)
        )
        children = children.all()
        class_ids = _ids(row.class_id for row in children)
        teacher_ids, subject_ids = await self._class_relations(class_ids)
        return CallerContext(
            caller=caller,
            name=parent.full_name,
            # a parent is associated with the schools of their children
            school_ids=_ids(row.school_id for row in children),
            class_ids=class_ids,
            taught_class_ids=class_ids,
            student_ids=_ids(row.id for row in children),
            parent_ids=(parent.id,),
            teacher_ids=teacher_ids,
            subject_ids=subject_ids,
        )
