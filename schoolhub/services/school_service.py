# schoolhub/services/school_service.py
from typing import Dict, List, Optional, Tuple

from sqlalchemy import delete, func, select, update

from schoolhub.core.permissions import Action, Resource
from schoolhub.core.scope import CallerContext, resolve_scope
from schoolhub.models import (
    AcademicTerm, AdmissionCounter, Administration, Announcement, Class, Event, GalleryItem,
    Grade, NewsPost, Parent, School, Student, Subject, Teacher,
)
from schoolhub.schemas.common import BlockedItem
from schoolhub.schemas.school import (
    SchoolCreateRequest, SchoolDetailResponse, SchoolResponse, SchoolUpdateRequest,
)
from schoolhub.services.base_service import BaseService

DUPLICATE_MESSAGE = "School with this name or email already exists"
LOGO_FOLDER = "logos"


class SchoolService(BaseService):
    model = School
    resource = Resource.SCHOOLS
    label = "School"
    search_fields = ("name", "email", "school_type")
    school_column = "id"
    file_column = "logo"
    blocked_message = "Cannot delete school(s) that still have students, teachers or classes"

    def _unique_clauses(self, name: Optional[str], email: Optional[str]):
        clauses = []
        if name:
            clauses.append(func.lower(School.name) == name.lower())
        if email:
            clauses.append(func.lower(School.email) == email.lower())
        return clauses

    async def create(
        self,
        ctx: CallerContext,
        data: SchoolCreateRequest,
        logo: Optional[bytes] = None,
        filename: Optional[str] = None
    ) -> School:
        resolve_scope(ctx, self.resource, Action.CREATE)
        await self.ensure_unique(self._unique_clauses(data.name, data.email), DUPLICATE_MESSAGE)

        reference = await self.storage.upload(logo, filename, LOGO_FOLDER) if logo else None
        try:
            return await self.save(School(**data.model_dump(), logo=reference))
        except Exception:
            await self.discard_file(reference)
            raise

    async def update(
        self,
        ctx: CallerContext,
        school_id: int,
        data: SchoolUpdateRequest,
        logo: Optional[bytes] = None,
        filename: Optional[str] = None
    ) -> School:
        school = await self.get(ctx, school_id, Action.UPDATE)
        changes = data.model_dump(exclude_unset=True)
        clauses = self._unique_clauses(changes.get("name"), changes.get("email"))
        if clauses:
            await self.ensure_unique(clauses, DUPLICATE_MESSAGE, exclude_id=school.id)
        self.apply_changes(school, changes)
        if logo:
            return await self.replace_file(ctx, school.id, logo, filename, LOGO_FOLDER)
        return await self.save(school)

    async def member_counts(self, school_ids: List[int]) -> Dict[int, Dict[str, int]]:
        counts = {school_id: {"students": 0, "teachers": 0, "classes": 0} for school_id in school_ids}
        for key, model in (("students", Student), ("teachers", Teacher), ("classes", Class)):
            result = await self.db.execute(
                select(model.school_id, func.count(model.id))
                .where(model.school_id.in_(school_ids))
                .group_by(model.school_id)
            )
            for school_id, count in result.all():
                counts[school_id][key] = count
        return counts

    async def detail(self, ctx: CallerContext, school_id: int) -> SchoolDetailResponse:
        school = await self.get(ctx, school_id)
        counts = await self.member_counts([school.id])
        members = counts[school.id]
        return SchoolDetailResponse(
            **SchoolResponse.model_validate(school).model_dump(),
            student_count=members["students"],
            teacher_count=members["teachers"],
            class_count=members["classes"],
        )

    async def check_deletable(self, ctx: CallerContext, ids: List[int]) -> Tuple[List[int], List[BlockedItem]]:
        counts = await self.member_counts(ids)
        deletable, blocked = [], []
        for school_id in ids:
            members = counts[school_id]
            if any(members.values()):
                blocked.append(BlockedItem(
                    id=school_id,
                    reason="School still has members",
                    students=members["students"],
                    relationships=dict(members)
                ))
            else:
                deletable.append(school_id)
        return deletable, blocked

    async def delete_dependents(self, ids: List[int]) -> Optional[Dict[str, int]]:
        gallery = await self.db.execute(
            select(GalleryItem.image_url).where(GalleryItem.school_id.in_(ids))
        )
        self.pending_files.extend(gallery.scalars().all())

        await self.db.execute(
            update(Administration).where(Administration.school_id.in_(ids)).values(school_id=None)
        )
        cascaded = {}
        for key, model in (
            ("subjects", Subject),
            ("parents", Parent),
            ("grades", Grade),
            ("terms", AcademicTerm),
            ("events", Event),
            ("announcements", Announcement),
            ("news", NewsPost),
            ("gallery", GalleryItem),
            ("admission_counters", AdmissionCounter),
        ):
            result = await self.db.execute(delete(model).where(model.school_id.in_(ids)))
            cascaded[key] = result.rowcount
        return cascaded
