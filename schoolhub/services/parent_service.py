# schoolhub/services/parent_service.py
from typing import List, Optional, Tuple

from sqlalchemy import func, select

from schoolhub.core.permissions import Action, Resource
from schoolhub.core.scope import CallerContext, resolve_scope, resolve_target_school
from schoolhub.models import Parent, Student
from schoolhub.schemas.common import BlockedItem
from schoolhub.schemas.parent import ParentCreateRequest, ParentUpdateRequest
from schoolhub.services.base_service import BaseService, ListParams

DUPLICATE_MESSAGE = "Parent with this email already exists"


class ParentService(BaseService):
    model = Parent
    resource = Resource.PARENTS
    label = "Parent"
    search_fields = ("firstname", "surname", "othername", "email", "phone")
    file_column = "avatar"
    blocked_message = "Cannot delete parent(s) with registered children"

    async def list_parents(
        self,
        ctx: CallerContext,
        params: ListParams,
        student_id: Optional[int] = None
    ) -> Tuple[List[Parent], int]:
        filters = []
        if student_id is not None:
            filters.append(
                Parent.id.in_(select(Student.parent_id).where(Student.id == student_id))
            )
        return await self.list(ctx, params, filters)

    async def create(self, ctx: CallerContext, data: ParentCreateRequest) -> Parent:
        resolve_scope(ctx, self.resource, Action.CREATE)
        school_id = resolve_target_school(ctx, data.school_id)
        await self.get_school(school_id)
        await self.ensure_unique([func.lower(Parent.email) == data.email.lower()], DUPLICATE_MESSAGE)

        parent = Parent(
            **data.model_dump(exclude={"password", "school_id"}),
            password_hash=self.hash_password(data.password),
            school_id=school_id,
        )
        return await self.save(parent)

    async def update(self, ctx: CallerContext, parent_id: int, data: ParentUpdateRequest) -> Parent:
        parent = await self.get(ctx, parent_id, Action.UPDATE)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("email"):
            await self.ensure_unique(
                [func.lower(Parent.email) == changes["email"].lower()],
                DUPLICATE_MESSAGE,
                exclude_id=parent.id
            )

        password = changes.pop("password", None)
        if password:
            changes["password_hash"] = self.hash_password(password)

        self.apply_changes(parent, changes)
        return await self.save(parent)

    async def check_deletable(self, ctx: CallerContext, ids: List[int]) -> Tuple[List[int], List[BlockedItem]]:
        result = await self.db.execute(
            select(Student.parent_id, func.count(Student.id))
            .where(Student.parent_id.in_(ids))
            .group_by(Student.parent_id)
        )
        children = dict(result.all())

        deletable, blocked = [], []
        for parent_id in ids:
            if children.get(parent_id):
                blocked.append(BlockedItem(
                    id=parent_id,
                    reason="Parent has registered children",
                    students=children[parent_id]
                ))
            else:
                deletable.append(parent_id)
        return deletable, blocked
