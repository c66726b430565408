# schoolhub/services/administration_service.py
from typing import List, Optional, Tuple

from sqlalchemy import select

from schoolhub.core.config import settings
from schoolhub.core.errors import PermissionDenied, ValidationError
from schoolhub.core.logging import logger
from schoolhub.core.permissions import Action, Resource
from schoolhub.core.scope import CallerContext, resolve_scope, resolve_target_school
from schoolhub.core.security import get_password_hash
from schoolhub.models import Administration
from schoolhub.schemas.administration import AdministrationCreateRequest, AdministrationUpdateRequest
from schoolhub.schemas.common import BlockedItem
from schoolhub.schemas.enums import AdminRole
from schoolhub.services.base_service import BaseService, ListParams

DUPLICATE_MESSAGE = "Username or email already in use"


class AdministrationService(BaseService):
    model = Administration
    resource = Resource.ADMINISTRATIONS
    label = "Administration"
    search_fields = ("username", "email")
    file_column = "avatar"
    blocked_message = "Cannot delete your own administration record or no valid records found"

    async def list_administrations(
        self,
        ctx: CallerContext,
        params: ListParams,
        role: Optional[AdminRole] = None
    ) -> Tuple[List[Administration], int]:
        filters = [Administration.role == role] if role else []
        return await self.list(ctx, params, filters)

    async def create(self, ctx: CallerContext, data: AdministrationCreateRequest) -> Administration:
        resolve_scope(ctx, self.resource, Action.CREATE)

        school_id = data.school_id
        if ctx.is_super:
            if data.role is not AdminRole.SUPER and school_id is None:
                raise ValidationError(
                    "School ID is required for non-super administrators",
                    details=[{"field": "school_id", "message": "Field required"}]
                )
        else:
            if data.role is AdminRole.SUPER:
                raise PermissionDenied("Only super administrators can create super administrators")
            school_id = resolve_target_school(ctx, school_id)

        if school_id is not None:
            await self.get_school(school_id)

        # email and username are unique across every school
        await self.ensure_unique(
            [Administration.email == data.email, Administration.username == data.username],
            DUPLICATE_MESSAGE
        )

        admin = Administration(
            username=data.username,
            email=data.email,
            password_hash=self.hash_password(data.password),
            role=data.role,
            section=data.section,
            active=data.active,
            school_id=school_id,
        )
        return await self.save(admin)

    async def update(self, ctx: CallerContext, admin_id: int, data: AdministrationUpdateRequest) -> Administration:
        admin = await self.get(ctx, admin_id, Action.UPDATE)
        changes = data.model_dump(exclude_unset=True)

        role = changes.get("role")
        if role is not None and role != admin.role and not ctx.is_super:
            raise PermissionDenied("You cannot change your own role")

        school_id = changes.pop("school_id", None)
        if school_id is not None and school_id != admin.school_id:
            if not ctx.is_super:
                raise PermissionDenied("Only super administrators can move administrators between schools")
            await self.get_school(school_id)
            changes["school_id"] = school_id

        if (
            role is not None
            and role is not AdminRole.SUPER
            and changes.get("school_id", admin.school_id) is None
        ):
            raise ValidationError(
                "School ID is required for non-super administrators",
                details=[{"field": "school_id", "message": "Field required"}]
            )

        unique = []
        if changes.get("email"):
            unique.append(Administration.email == changes["email"])
        if changes.get("username"):
            unique.append(Administration.username == changes["username"])
        if unique:
            await self.ensure_unique(unique, DUPLICATE_MESSAGE, exclude_id=admin.id)

        password = changes.pop("password", None)
        if password:
            changes["password_hash"] = self.hash_password(password)

        self.apply_changes(admin, changes)
        return await self.save(admin)

    async def check_deletable(self, ctx: CallerContext, ids: List[int]) -> Tuple[List[int], List[BlockedItem]]:
        blocked = []
        if ctx.id in ids:
            blocked.append(BlockedItem(id=ctx.id, reason="Cannot delete your own administration record"))

        others = [i for i in ids if i != ctx.id]
        if others and not ctx.is_super:
            result = await self.db.execute(
                select(Administration.id).where(
                    Administration.id.in_(others),
                    Administration.role == AdminRole.SUPER
                )
            )
            supers = set(result.scalars().all())
            blocked.extend(
                BlockedItem(id=i, reason="Only super administrators can delete super administrators")
                for i in sorted(supers)
            )
            others = [i for i in others if i not in supers]

        return others, blocked


async def create_super_admin(db) -> None:
    """Create the bootstrap super administrator from settings when none exists yet."""
    if not (settings.SUPER_ADMIN_EMAIL and settings.SUPER_ADMIN_PASSWORD):
        return

    existing = await db.scalar(
        select(Administration.id).where(Administration.email == settings.SUPER_ADMIN_EMAIL)
    )
    if existing is not None:
        logger.info("Super admin already exists")
        return

    db.add(Administration(
        username="superadmin",
        email=settings.SUPER_ADMIN_EMAIL,
        password_hash=get_password_hash(settings.SUPER_ADMIN_PASSWORD),
        role=AdminRole.SUPER,
        active=True,
    ))
    await db.commit()
    logger.info("Super admin created successfully")
