# schoolhub/services/teacher_service.py
from typing import Dict, List, Optional, Tuple

from sqlalchemy import and_, func, select, update

from schoolhub.core.errors import ValidationError
from schoolhub.core.permissions import Action, Resource
from schoolhub.core.scope import CallerContext, resolve_scope, resolve_target_school
from schoolhub.models import Class, Lesson, Subject, Teacher
from schoolhub.schemas.common import BlockedItem
from schoolhub.schemas.teacher import TeacherCreateRequest, TeacherUpdateRequest
from schoolhub.services.base_service import BaseService

DUPLICATE_MESSAGE = "Teacher with this email or phone already exists"


class TeacherService(BaseService):
    model = Teacher
    resource = Resource.TEACHERS
    label = "Teacher"
    search_fields = ("firstname", "surname", "othername", "email", "username")
    file_column = "avatar"
    blocked_message = "Cannot delete teacher(s) with assigned classes, subjects or lessons"

    def _unique_clauses(self, school_id: int, email: Optional[str], phone: Optional[str]):
        clauses = []
        if email:
            clauses.append(func.lower(Teacher.email) == email.lower())
        if phone:
            clauses.append(and_(Teacher.school_id == school_id, Teacher.phone == phone))
        return clauses

    async def _validate_subjects(self, subject_ids: List[int], school_id: int) -> None:
        if not subject_ids:
            return
        found = await self.db.scalar(
            select(func.count(Subject.id)).where(
                Subject.id.in_(set(subject_ids)),
                Subject.school_id == school_id
            )
        )
        if found != len(set(subject_ids)):
            raise ValidationError(
                "One or more subjects not found in this school",
                details=[{"field": "subject_ids", "message": "Unknown subject"}]
            )

    async def create(self, ctx: CallerContext, data: TeacherCreateRequest) -> Teacher:
        resolve_scope(ctx, self.resource, Action.CREATE)
        school_id = resolve_target_school(ctx, data.school_id)
        await self.get_school(school_id)
        await self.ensure_unique(self._unique_clauses(school_id, data.email, data.phone), DUPLICATE_MESSAGE)
        await self._validate_subjects(data.subject_ids, school_id)

        values = data.model_dump(exclude={"password", "subject_ids", "school_id"})
        teacher = Teacher(
            **values,
            password_hash=self.hash_password(data.password),
            school_id=school_id,
        )
        async with self.transaction():
            self.db.add(teacher)
            await self.db.flush()
            if data.subject_ids:
                await self.db.execute(
                    update(Subject)
                    .where(Subject.id.in_(set(data.subject_ids)))
                    .values(teacher_id=teacher.id)
                )
        await self.db.refresh(teacher)
        return teacher

    async def update(self, ctx: CallerContext, teacher_id: int, data: TeacherUpdateRequest) -> Teacher:
        teacher = await self.get(ctx, teacher_id, Action.UPDATE)
        changes = data.model_dump(exclude_unset=True)

        clauses = self._unique_clauses(teacher.school_id, changes.get("email"), changes.get("phone"))
        if clauses:
            await self.ensure_unique(clauses, DUPLICATE_MESSAGE, exclude_id=teacher.id)

        password = changes.pop("password", None)
        if password:
            changes["password_hash"] = self.hash_password(password)

        self.apply_changes(teacher, changes)
        return await self.save(teacher)

    async def _names_by_teacher(self, model, column, ids: List[int]) -> Dict[int, List[str]]:
        result = await self.db.execute(select(column, model.name).where(column.in_(ids)))
        names: Dict[int, List[str]] = {}
        for teacher_id, name in result.all():
            names.setdefault(teacher_id, []).append(name)
        return names

    async def check_deletable(self, ctx: CallerContext, ids: List[int]) -> Tuple[List[int], List[BlockedItem]]:
        classes = await self._names_by_teacher(Class, Class.form_master_id, ids)
        subjects = await self._names_by_teacher(Subject, Subject.teacher_id, ids)
        lessons = await self._names_by_teacher(Lesson, Lesson.teacher_id, ids)

        names = await self.db.execute(select(Teacher.id, Teacher.firstname, Teacher.surname).where(Teacher.id.in_(ids)))
        names = {row.id: f"{row.firstname} {row.surname}" for row in names.all()}

        deletable, blocked = [], []
        for teacher_id in ids:
            relationships = {
                key: values[teacher_id]
                for key, values in (("classes", classes), ("subjects", subjects), ("lessons", lessons))
                if teacher_id in values
            }
            if relationships:
                blocked.append(BlockedItem(
                    id=teacher_id,
                    name=names.get(teacher_id),
                    reason="Teacher has assigned " + ", ".join(relationships),
                    relationships=relationships
                ))
            else:
                deletable.append(teacher_id)
        return deletable, blocked
