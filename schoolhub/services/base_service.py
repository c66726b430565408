# schoolhub/services/base_service.py
from contextlib import asynccontextmanager
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.config import settings
from schoolhub.core.errors import ConflictError, NotFoundError, PreconditionFailed, ValidationError
from schoolhub.core.logging import logger
from schoolhub.core.permissions import Action, Resource
from schoolhub.core.scope import CallerContext, Scope, resolve_scope
from schoolhub.core.security import get_password_hash
from schoolhub.models import School
from schoolhub.schemas.common import BlockedItem, DeleteResponse
from schoolhub.services.storage_service import StorageService

LIKE_ESCAPE = "\\"


def escape_like(value: str) -> str:
    """Make ``%`` and ``_`` match themselves in a LIKE pattern."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class ListParams:
    """Common list query: text search, pagination and the super-only school filter."""

    def __init__(
        self,
        search: Optional[str] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        school_id: Optional[int] = None,
    ):
        self.search = search.strip() if search and search.strip() else None
        self.page = page
        self.limit = limit
        self.school_id = school_id


class BaseService:
    model = None
    resource: Resource = None
    label = "Record"
    search_fields: Tuple[str, ...] = ()
    school_column = "school_id"
    # column holding a storage reference that must be removed with the row
    file_column: Optional[str] = None
    blocked_message = "Selected records cannot be deleted"

    def __init__(self, db: AsyncSession, storage: Optional[StorageService] = None):
        self.db = db
        self.storage = storage
        # storage references to remove once the current delete has committed
        self.pending_files: List[str] = []

    def ordering(self):
        return (self.model.created_at.desc(), self.model.id.desc())

    @asynccontextmanager
    async def transaction(self):
        """Context manager for transaction handling"""
        try:
            yield
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

    # Reads

    def scoped(self, ctx: CallerContext, action: Action = Action.READ) -> Tuple[Any, Scope]:
        scope = resolve_scope(ctx, self.resource, action)
        return scope.apply(select(self.model), self.model), scope

    def search_clause(self, search: str):
        pattern = f"%{escape_like(search)}%"
        return or_(*(
            getattr(self.model, field).ilike(pattern, escape=LIKE_ESCAPE) for field in self.search_fields
        ))

    async def paginate(self, stmt, page: Optional[int] = None, limit: Optional[int] = None) -> Tuple[List[Any], int]:
        total = await self.db.scalar(
            select(func.count()).select_from(stmt.order_by(None).subquery())
        )
        stmt = stmt.order_by(*self.ordering())
        if page and limit:
            stmt = stmt.offset((page - 1) * limit).limit(limit)
        elif limit:
            stmt = stmt.limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all()), total or 0

    async def list(
        self,
        ctx: CallerContext,
        params: ListParams,
        filters: Iterable[Any] = ()
    ) -> Tuple[List[Any], int]:
        stmt, scope = self.scoped(ctx)
        if scope.empty:
            return [], 0

        if params.search and self.search_fields:
            stmt = stmt.where(self.search_clause(params.search))
        if ctx.is_super and params.school_id is not None:
            stmt = stmt.where(getattr(self.model, self.school_column) == params.school_id)
        for clause in filters:
            stmt = stmt.where(clause)

        return await self.paginate(stmt, params.page, params.limit)

    async def get(self, ctx: CallerContext, record_id: int, action: Action = Action.READ):
        stmt, _ = self.scoped(ctx, action)
        result = await self.db.execute(stmt.where(self.model.id == record_id))
        record = result.scalar_one_or_none()
        if record is None:
            raise NotFoundError(f"{self.label} not found")
        return record

    # Validation helpers

    async def get_school(self, school_id: int) -> School:
        school = await self.db.get(School, school_id)
        if school is None:
            raise NotFoundError("School not found")
        return school

    async def get_in_school(self, model, record_id: int, school_id: int, label: str, field: str):
        """Fetch a referenced row and make sure it belongs to ``school_id``."""
        record = await self.db.get(model, record_id)
        if record is None or record.school_id != school_id:
            raise ValidationError(
                f"{label} not found in this school",
                details=[{"field": field, "message": f"{label} {record_id} not found in school {school_id}"}]
            )
        return record

    async def ensure_unique(
        self,
        clauses: Sequence[Any],
        message: str,
        exclude_id: Optional[int] = None
    ) -> None:
        stmt = select(self.model.id).where(or_(*clauses) if len(clauses) > 1 else clauses[0])
        if exclude_id is not None:
            stmt = stmt.where(self.model.id != exclude_id)
        if await self.db.scalar(stmt.limit(1)) is not None:
            raise ConflictError(message)

    @staticmethod
    def hash_password(password: Optional[str]) -> str:
        """Hash the given password, falling back to the default placeholder."""
        return get_password_hash(password or settings.DEFAULT_PASSWORD)

    def apply_changes(self, record: Any, changes: Dict[str, Any]) -> None:
        """Copy a partial update onto ``record``; nulls for required columns are ignored."""
        columns = self.model.__table__.c
        for field, value in changes.items():
            if value is None and field in columns and not columns[field].nullable:
                continue
            setattr(record, field, value)

    async def save(self, record: Any) -> Any:
        try:
            async with self.transaction():
                self.db.add(record)
        except IntegrityError:
            # a concurrent request won the uniqueness race
            raise ConflictError(f"{self.label} already exists")
        await self.db.refresh(record)
        return record

    # Deletes

    async def allowed_ids(self, ctx: CallerContext, ids: Sequence[int]) -> List[int]:
        """The subset of ``ids`` the caller may delete."""
        scope = resolve_scope(ctx, self.resource, Action.DELETE)
        if scope.empty:
            return []
        stmt = scope.apply(select(self.model.id), self.model).where(self.model.id.in_(set(ids)))
        result = await self.db.execute(stmt)
        return sorted(result.scalars().all())

    async def check_deletable(self, ctx: CallerContext, ids: List[int]) -> Tuple[List[int], List[BlockedItem]]:
        return ids, []

    async def delete_dependents(self, ids: List[int]) -> Optional[Dict[str, int]]:
        return None

    async def delete_many(self, ctx: CallerContext, ids: Sequence[int]) -> DeleteResponse:
        if not ids:
            raise ValidationError("No IDs provided")

        allowed = await self.allowed_ids(ctx, ids)
        if not allowed:
            raise NotFoundError(f"No matching {self.resource.value} found")

        deletable, blocked = await self.check_deletable(ctx, allowed)
        if not deletable:
            raise PreconditionFailed(
                self.blocked_message,
                blocked=[item.model_dump(exclude_none=True) for item in blocked]
            )

        files: List[str] = []
        if self.file_column:
            column = getattr(self.model, self.file_column)
            result = await self.db.execute(
                select(column).where(and_(self.model.id.in_(deletable), column.isnot(None)))
            )
            files = list(result.scalars().all())

        async with self.transaction():
            cascaded = await self.delete_dependents(deletable)
            result = await self.db.execute(delete(self.model).where(self.model.id.in_(deletable)))
        deleted = result.rowcount

        logger.info(
            f"{ctx.role.value} {ctx.id} deleted {deleted} {self.resource.value}",
            extra={"user_id": ctx.id, "role": ctx.role.value, "resource": self.resource.value}
        )

        for reference in files + self.pending_files:
            await self.discard_file(reference)

        return DeleteResponse(
            deleted=deleted,
            blocked=blocked,
            cascaded=cascaded,
            message=f"Successfully deleted {deleted} {self.resource.value}"
        )

    async def discard_file(self, reference: Optional[str]) -> None:
        """Remove a stored file; failures are logged and never raised."""
        if not reference or self.storage is None:
            return
        try:
            await self.storage.delete(reference)
        except Exception as e:
            logger.warning(f"Failed to delete stored file {reference}: {str(e)}")

    async def replace_file(
        self,
        ctx: CallerContext,
        record_id: int,
        content: bytes,
        filename: Optional[str],
        folder: str
    ) -> Any:
        """Upload a new file for ``record_id`` and drop the one it replaces."""
        record = await self.get(ctx, record_id, Action.UPDATE)
        reference = await self.storage.upload(content, filename, folder)
        previous = getattr(record, self.file_column)
        setattr(record, self.file_column, reference)
        try:
            await self.save(record)
        except Exception:
            await self.discard_file(reference)
            raise
        await self.discard_file(previous)
        return record
