# schoolhub/services/bulletin_service.py
"""
Shared behaviour of events and announcements.

A row without a class is school-wide; a row without a school (super only) is shown to
every school.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from schoolhub.core.errors import PermissionDenied, ValidationError
from schoolhub.core.permissions import Action
from schoolhub.core.scope import CallerContext, Scope, resolve_scope, resolve_target_school
from schoolhub.models import Class
from schoolhub.services.base_service import BaseService, ListParams

OWN_CLASSES_ONLY = "You can only post to your own classes"


class BulletinService(BaseService):
    # column used by the from/to date filter
    date_column = "created_at"
    search_fields = ("title", "description")

    async def list_bulletins(
        self,
        ctx: CallerContext,
        params: ListParams,
        class_id: Optional[int] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None
    ) -> Tuple[List[Any], int]:
        column = getattr(self.model, self.date_column)
        filters = []
        if class_id is not None:
            filters.append(self.model.class_id == class_id)
        if date_from is not None:
            filters.append(column >= date_from)
        if date_to is not None:
            filters.append(column <= date_to)
        return await self.list(ctx, params, filters)

    async def _target(self, ctx: CallerContext, school_id: Optional[int], class_id: Optional[int]) -> Optional[int]:
        """School of a new row; ``None`` only for global rows posted by a super administrator."""
        if ctx.is_super and school_id is None:
            if class_id is None:
                return None
            record = await self.db.get(Class, class_id)
            if record is None:
                raise ValidationError(
                    "Class not found",
                    details=[{"field": "class_id", "message": f"Class {class_id} not found"}]
                )
            return record.school_id

        school_id = resolve_target_school(ctx, school_id)
        await self.get_school(school_id)
        if class_id is not None:
            await self.get_in_school(Class, class_id, school_id, "Class", "class_id")
        return school_id

    @staticmethod
    def _check_scope(scope: Scope, school_id: Optional[int], class_id: Optional[int]) -> None:
        if not scope.permits(school_id=school_id, class_id=class_id):
            raise PermissionDenied(OWN_CLASSES_ONLY)

    async def create_bulletin(self, ctx: CallerContext, values: Dict[str, Any]) -> Any:
        scope = resolve_scope(ctx, self.resource, Action.CREATE)
        class_id = values.get("class_id")
        school_id = await self._target(ctx, values.pop("school_id", None), class_id)
        self._check_scope(scope, school_id, class_id)
        return await self.save(self.model(**values, school_id=school_id))

    async def update_bulletin(self, ctx: CallerContext, record_id: int, changes: Dict[str, Any]) -> Any:
        scope = resolve_scope(ctx, self.resource, Action.UPDATE)
        record = await self.get(ctx, record_id, Action.UPDATE)

        if changes.get("class_id") is not None:
            if record.school_id is None:
                raise ValidationError("Global posts cannot be assigned to a class")
            await self.get_in_school(Class, changes["class_id"], record.school_id, "Class", "class_id")
        if "class_id" in changes:
            self._check_scope(scope, record.school_id, changes["class_id"])

        self.apply_changes(record, changes)
        return await self.save(record)
