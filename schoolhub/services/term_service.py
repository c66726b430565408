# schoolhub/services/term_service.py
from datetime import date
from typing import Dict, List, Optional, Tuple

from sqlalchemy import select, update

from schoolhub.core.errors import NotFoundError, ValidationError
from schoolhub.core.logging import logger
from schoolhub.core.permissions import Action, Resource
from schoolhub.core.scope import CallerContext, resolve_scope, resolve_target_school
from schoolhub.models import AcademicTerm
from schoolhub.schemas.enums import TermStatus
from schoolhub.schemas.term import TermCreateRequest, TermUpdateRequest
from schoolhub.services.base_service import BaseService, ListParams


def days_between(start: date, end: date) -> int:
    return max((end - start).days, 1)


class TermService(BaseService):
    """School terms. Activating a term deactivates the other terms of its school."""
    model = AcademicTerm
    resource = Resource.TERMS
    label = "Term"
    search_fields = ("session",)

    def ordering(self):
        return (AcademicTerm.status.asc(), AcademicTerm.created_at.desc(), AcademicTerm.id.desc())

    async def list_terms(
        self,
        ctx: CallerContext,
        params: ListParams,
        status: Optional[TermStatus] = None,
        session: Optional[str] = None
    ) -> Tuple[List[AcademicTerm], int]:
        filters = []
        if status is not None:
            filters.append(AcademicTerm.status == status)
        if session:
            filters.append(AcademicTerm.session == session)
        return await self.list(ctx, params, filters)

    async def current(self, ctx: CallerContext, school_id: Optional[int] = None) -> Optional[AcademicTerm]:
        """The active term of ``school_id`` or, without one, of any school the caller sees."""
        stmt, scope = self.scoped(ctx)
        if scope.empty:
            return None
        stmt = stmt.where(AcademicTerm.status == TermStatus.ACTIVE)
        if school_id is not None:
            stmt = stmt.where(AcademicTerm.school_id == school_id)
        result = await self.db.execute(
            stmt.order_by(AcademicTerm.created_at.desc(), AcademicTerm.id.desc()).limit(1)
        )
        return result.scalar_one_or_none()

    async def get_current(self, ctx: CallerContext, school_id: Optional[int] = None) -> AcademicTerm:
        term = await self.current(ctx, school_id)
        if term is None:
            raise NotFoundError("No active term found")
        return term

    async def _deactivate_others(self, school_id: int, keep_id: Optional[int] = None) -> None:
        stmt = (
            update(AcademicTerm)
            .where(AcademicTerm.school_id == school_id, AcademicTerm.status == TermStatus.ACTIVE)
            .values(status=TermStatus.INACTIVE)
        )
        if keep_id is not None:
            stmt = stmt.where(AcademicTerm.id != keep_id)
        await self.db.execute(stmt)

    async def create(self, ctx: CallerContext, data: TermCreateRequest) -> AcademicTerm:
        resolve_scope(ctx, self.resource, Action.CREATE)
        school_id = resolve_target_school(ctx, data.school_id)
        await self.get_school(school_id)

        values = data.model_dump(exclude={"school_id"})
        if values["days_open"] is None:
            values["days_open"] = days_between(data.start, data.end)
        term = AcademicTerm(**values, school_id=school_id)

        async with self.transaction():
            if term.status is TermStatus.ACTIVE:
                await self._deactivate_others(school_id)
            self.db.add(term)
        await self.db.refresh(term)
        logger.info(f"Term {term.session} {term.term.value} created for school {school_id}")
        return term

    async def update(self, ctx: CallerContext, term_id: int, data: TermUpdateRequest) -> AcademicTerm:
        term = await self.get(ctx, term_id, Action.UPDATE)
        changes = data.model_dump(exclude_unset=True)

        start = changes.get("start") or term.start
        end = changes.get("end") or term.end
        if end <= start:
            raise ValidationError(
                "Term end must be after its start",
                details=[{"field": "end", "message": "Term end must be after its start"}]
            )

        self.apply_changes(term, changes)
        async with self.transaction():
            if changes.get("status") is TermStatus.ACTIVE:
                await self._deactivate_others(term.school_id, keep_id=term.id)
            self.db.add(term)
        await self.db.refresh(term)
        return term

    async def delete_dependents(self, ids: List[int]) -> Optional[Dict[str, int]]:
        # the newest remaining term of a school takes over when its active term goes
        result = await self.db.execute(
            select(AcademicTerm.school_id).where(
                AcademicTerm.id.in_(ids), AcademicTerm.status == TermStatus.ACTIVE
            )
        )
        for school_id in set(result.scalars().all()):
            successor = await self.db.scalar(
                select(AcademicTerm.id)
                .where(AcademicTerm.school_id == school_id, AcademicTerm.id.notin_(ids))
                .order_by(AcademicTerm.created_at.desc(), AcademicTerm.id.desc())
                .limit(1)
            )
            if successor is not None:
                await self.db.execute(
                    update(AcademicTerm)
                    .where(AcademicTerm.id == successor)
                    .values(status=TermStatus.ACTIVE)
                )
        return None
