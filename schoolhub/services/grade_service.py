# schoolhub/services/grade_service.py
from typing import Dict, List, Optional, Tuple

from sqlalchemy import delete

from schoolhub.core.permissions import Action, Resource
from schoolhub.core.scope import CallerContext, resolve_scope, resolve_target_school
from schoolhub.models import Grade, ReportCard, StudentGrade
from schoolhub.schemas.enums import Term
from schoolhub.schemas.grade import GradeCreateRequest, GradeUpdateRequest
from schoolhub.services.base_service import BaseService, ListParams

DUPLICATE_MESSAGE = "A grade for this session and term already exists"


class GradeService(BaseService):
    model = Grade
    resource = Resource.GRADES
    label = "Grade"
    search_fields = ("title", "session")

    async def list_grades(
        self,
        ctx: CallerContext,
        params: ListParams,
        term: Optional[Term] = None,
        session: Optional[str] = None,
        published: Optional[bool] = None
    ) -> Tuple[List[Grade], int]:
        filters = []
        if term is not None:
            filters.append(Grade.term == term)
        if session:
            filters.append(Grade.session == session)
        if published is not None:
            filters.append(Grade.published == published)
        return await self.list(ctx, params, filters)

    async def _ensure_unique_period(
        self,
        school_id: int,
        session: str,
        term: Term,
        exclude_id: Optional[int] = None
    ) -> None:
        await self.ensure_unique(
            [(Grade.school_id == school_id) & (Grade.session == session) & (Grade.term == term)],
            DUPLICATE_MESSAGE,
            exclude_id=exclude_id
        )

    async def create(self, ctx: CallerContext, data: GradeCreateRequest) -> Grade:
        resolve_scope(ctx, self.resource, Action.CREATE)
        school_id = resolve_target_school(ctx, data.school_id)
        await self.get_school(school_id)
        await self._ensure_unique_period(school_id, data.session, data.term)
        return await self.save(Grade(**data.model_dump(exclude={"school_id"}), school_id=school_id))

    async def update(self, ctx: CallerContext, grade_id: int, data: GradeUpdateRequest) -> Grade:
        grade = await self.get(ctx, grade_id, Action.UPDATE)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("session") or changes.get("term"):
            await self._ensure_unique_period(
                grade.school_id,
                changes.get("session") or grade.session,
                changes.get("term") or grade.term,
                exclude_id=grade.id
            )
        self.apply_changes(grade, changes)
        return await self.save(grade)

    async def delete_dependents(self, ids: List[int]) -> Optional[Dict[str, int]]:
        results = await self.db.execute(delete(StudentGrade).where(StudentGrade.grade_id.in_(ids)))
        reports = await self.db.execute(delete(ReportCard).where(ReportCard.grade_id.in_(ids)))
        return {"student_grades": results.rowcount, "report_cards": reports.rowcount}
