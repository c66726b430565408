# schoolhub/services/student_service.py
from datetime import date
from typing import Dict, List, Optional, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from tenacity import retry, retry_if_exception_type, stop_after_attempt

from schoolhub.core.errors import ConflictError, PermissionDenied, ValidationError
from schoolhub.core.logging import logger
from schoolhub.core.permissions import Action, Resource
from schoolhub.core.scope import CallerContext, Scope, resolve_scope, resolve_target_school
from schoolhub.models import Attendance, Class, Parent, ReportCard, Student, StudentGrade
from schoolhub.schemas.student import StudentCreateRequest, StudentUpdateRequest
from schoolhub.services.admission_service import AdmissionNumberAllocator, admission_prefix
from schoolhub.services.base_service import BaseService, ListParams

FORM_CLASS_ONLY = "You can only manage students of your form master class"
CAPACITY_REACHED = "Class capacity reached"


class StudentService(BaseService):
    model = Student
    resource = Resource.STUDENTS
    label = "Student"
    search_fields = ("firstname", "surname", "othername", "admission_number", "email")
    file_column = "avatar"

    async def list_students(
        self,
        ctx: CallerContext,
        params: ListParams,
        class_id: Optional[int] = None,
        parent_id: Optional[int] = None
    ) -> Tuple[List[Student], int]:
        filters = []
        if class_id is not None:
            filters.append(Student.class_id == class_id)
        if parent_id is not None:
            filters.append(Student.parent_id == parent_id)
        return await self.list(ctx, params, filters)

    async def _check_class(self, scope: Scope, school_id: int, class_id: int) -> Class:
        student_class = await self.get_in_school(Class, class_id, school_id, "Class", "class_id")
        if not scope.permits(school_id=school_id, class_id=class_id):
            raise PermissionDenied(FORM_CLASS_ONLY)
        if student_class.capacity is not None:
            enrolled = await self.db.scalar(
                select(func.count(Student.id)).where(Student.class_id == class_id)
            )
            if enrolled >= student_class.capacity:
                raise ValidationError(
                    CAPACITY_REACHED,
                    details=[{"field": "class_id", "message": f"Class {class_id} is full"}]
                )
        return student_class

    async def _ensure_email_free(self, email: Optional[str], exclude_id: Optional[int] = None) -> None:
        if email:
            await self.ensure_unique(
                [func.lower(Student.email) == email.lower()],
                "Student with this email already exists",
                exclude_id=exclude_id
            )

    @retry(
        retry=retry_if_exception_type(IntegrityError),
        stop=stop_after_attempt(3),
        reraise=True
    )
    async def _insert(self, school_id: int, prefix: str, values: Dict, password_hash: str) -> Student:
        async with self.transaction():
            admission_number = await AdmissionNumberAllocator(self.db).allocate(
                school_id, prefix, date.today().year
            )
            student = Student(
                **values,
                password_hash=password_hash,
                admission_number=admission_number,
                school_id=school_id,
            )
            self.db.add(student)
            await self.db.flush()
        return student

    async def create(self, ctx: CallerContext, data: StudentCreateRequest) -> Student:
        scope = resolve_scope(ctx, self.resource, Action.CREATE)
        school_id = resolve_target_school(ctx, data.school_id)
        school = await self.get_school(school_id)
        await self._check_class(scope, school_id, data.class_id)
        await self.get_in_school(Parent, data.parent_id, school_id, "Parent", "parent_id")
        await self._ensure_email_free(data.email)

        values = data.model_dump(exclude={"password", "school_id"})
        password_hash = self.hash_password(data.password)
        try:
            student = await self._insert(school_id, admission_prefix(school), values, password_hash)
        except IntegrityError:
            logger.error(f"Could not allocate an admission number for school {school_id}")
            raise ConflictError("Student could not be created, please retry")

        logger.info(
            f"Student {student.admission_number} admitted to class {student.class_id}",
            extra={"user_id": ctx.id, "role": ctx.role.value, "resource": self.resource.value}
        )
        await self.db.refresh(student)
        return student

    async def update(self, ctx: CallerContext, student_id: int, data: StudentUpdateRequest) -> Student:
        scope = resolve_scope(ctx, self.resource, Action.UPDATE)
        student = await self.get(ctx, student_id, Action.UPDATE)
        changes = data.model_dump(exclude_unset=True)

        class_id = changes.get("class_id")
        if class_id is not None and class_id != student.class_id:
            await self._check_class(scope, student.school_id, class_id)
        parent_id = changes.get("parent_id")
        if parent_id is not None and parent_id != student.parent_id:
            await self.get_in_school(Parent, parent_id, student.school_id, "Parent", "parent_id")
        await self._ensure_email_free(changes.get("email"), exclude_id=student.id)

        password = changes.pop("password", None)
        if password:
            changes["password_hash"] = self.hash_password(password)

        self.apply_changes(student, changes)
        return await self.save(student)

    async def delete_dependents(self, ids: List[int]) -> Optional[Dict[str, int]]:
        grades = await self.db.execute(delete(StudentGrade).where(StudentGrade.student_id.in_(ids)))
        reports = await self.db.execute(delete(ReportCard).where(ReportCard.student_id.in_(ids)))
        attendance = await self.db.execute(delete(Attendance).where(Attendance.student_id.in_(ids)))
        return {
            "student_grades": grades.rowcount,
            "report_cards": reports.rowcount,
            "attendance": attendance.rowcount,
        }
