# schoolhub/services/subject_service.py
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, select

from schoolhub.core.permissions import Action, Resource
from schoolhub.core.scope import CallerContext, resolve_scope, resolve_target_school
from schoolhub.models import Lesson, StudentGrade, Subject, Teacher
from schoolhub.schemas.common import BlockedItem
from schoolhub.schemas.subject import SubjectCreateRequest, SubjectUpdateRequest
from schoolhub.services.base_service import BaseService, ListParams


class SubjectService(BaseService):
    model = Subject
    resource = Resource.SUBJECTS
    label = "Subject"
    search_fields = ("name", "category")
    blocked_message = "Cannot delete subject(s) with scheduled lessons or recorded results"

    async def list_subjects(
        self,
        ctx: CallerContext,
        params: ListParams,
        category: Optional[str] = None,
        teacher_id: Optional[int] = None
    ) -> Tuple[List[Subject], int]:
        filters = []
        if category:
            filters.append(Subject.category == category)
        if teacher_id is not None:
            filters.append(Subject.teacher_id == teacher_id)
        return await self.list(ctx, params, filters)

    async def create(self, ctx: CallerContext, data: SubjectCreateRequest) -> Subject:
        resolve_scope(ctx, self.resource, Action.CREATE)
        school_id = resolve_target_school(ctx, data.school_id)
        await self.get_school(school_id)
        if data.teacher_id is not None:
            await self.get_in_school(Teacher, data.teacher_id, school_id, "Teacher", "teacher_id")
        return await self.save(Subject(**data.model_dump(exclude={"school_id"}), school_id=school_id))

    async def update(self, ctx: CallerContext, subject_id: int, data: SubjectUpdateRequest) -> Subject:
        subject = await self.get(ctx, subject_id, Action.UPDATE)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("teacher_id") is not None:
            await self.get_in_school(Teacher, changes["teacher_id"], subject.school_id, "Teacher", "teacher_id")
        self.apply_changes(subject, changes)
        return await self.save(subject)

    async def _count_by_subject(self, column, ids: List[int]) -> Dict[int, int]:
        result = await self.db.execute(
            select(column, func.count()).where(column.in_(ids)).group_by(column)
        )
        return dict(result.all())

    async def check_deletable(self, ctx: CallerContext, ids: List[int]) -> Tuple[List[int], List[BlockedItem]]:
        lessons = await self._count_by_subject(Lesson.subject_id, ids)
        results = await self._count_by_subject(StudentGrade.subject_id, ids)

        deletable, blocked = [], []
        for subject_id in ids:
            relationships = {
                key: counts[subject_id]
                for key, counts in (("lessons", lessons), ("results", results))
                if counts.get(subject_id)
            }
            if relationships:
                blocked.append(BlockedItem(
                    id=subject_id,
                    reason="Subject has " + " and ".join(relationships),
                    relationships=relationships
                ))
            else:
                deletable.append(subject_id)
        return deletable, blocked
