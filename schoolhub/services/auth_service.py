# schoolhub/services/auth_service.py
from typing import Any, List, Optional, Tuple

from fastapi import Response
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.config import settings
from schoolhub.core.errors import InvalidCredentialsError, NotFoundError, PermissionDenied, ValidationError
from schoolhub.core.logging import logger
from schoolhub.core.scope import CallerContext
from schoolhub.core.security import create_access_token, get_password_hash, verify_password
from schoolhub.models import Administration, Parent, Student, Teacher
from schoolhub.schemas.auth import CallerContextResponse, SessionUser, TokenResponse
from schoolhub.schemas.enums import Role

ACCOUNT_INACTIVE = "Account is inactive"


def _display_name(record: Any) -> str:
    if isinstance(record, Administration):
        return record.username
    return record.full_name


class AuthService:
    """Password login across the four account tables."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _candidates(self, identifier: str) -> List[Tuple[Any, Role]]:
        """Accounts matching ``identifier``, in lookup order."""
        lowered = identifier.lower()
        candidates: List[Tuple[Any, Role]] = []

        admins = await self.db.execute(
            select(Administration)
            .where(or_(func.lower(Administration.email) == lowered, Administration.username == identifier))
            .order_by(Administration.id)
        )
        candidates.extend((admin, admin.role.to_role()) for admin in admins.scalars().all())

        teacher = await self.db.scalar(select(Teacher).where(func.lower(Teacher.email) == lowered))
        if teacher is not None:
            candidates.append((teacher, Role.TEACHER))

        student = await self.db.scalar(
            select(Student).where(or_(
                Student.admission_number == identifier,
                func.lower(Student.email) == lowered
            ))
        )
        if student is not None:
            candidates.append((student, Role.STUDENT))

        parent = await self.db.scalar(select(Parent).where(func.lower(Parent.email) == lowered))
        if parent is not None:
            candidates.append((parent, Role.PARENT))
        return candidates

    async def authenticate(self, identifier: str, password: str) -> Tuple[Any, Role]:
        identifier = identifier.strip()
        for record, role in await self._candidates(identifier):
            if not verify_password(password, record.password_hash):
                continue
            if not record.active:
                logger.warning(f"Login refused for inactive {role.value} {record.id}")
                raise PermissionDenied(ACCOUNT_INACTIVE)
            return record, role

        logger.warning("Invalid credentials provided")
        raise InvalidCredentialsError()

    async def login(self, identifier: str, password: str, response: Response) -> TokenResponse:
        record, role = await self.authenticate(identifier, password)
        access_token = create_access_token(record.id, role)
        self.set_auth_cookie(response, access_token)

        logger.info("Login successful", extra={"user_id": record.id, "role": role.value})
        return TokenResponse(
            access_token=access_token,
            user=SessionUser(
                id=record.id,
                role=role,
                name=_display_name(record),
                school_id=record.school_id,
                school_ids=[record.school_id] if record.school_id is not None else [],
            )
        )

    @staticmethod
    def set_auth_cookie(response: Response, access_token: str) -> None:
        response.set_cookie(
            key=settings.COOKIE_NAME,
            value=access_token,
            max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            secure=settings.COOKIE_SECURE,
            httponly=settings.COOKIE_HTTPONLY,
            samesite=settings.COOKIE_SAMESITE,
            path=settings.COOKIE_PATH
        )

    @staticmethod
    def clear_auth_cookie(response: Response) -> None:
        response.delete_cookie(key=settings.COOKIE_NAME, path=settings.COOKIE_PATH)

    @staticmethod
    def describe(ctx: CallerContext) -> CallerContextResponse:
        return CallerContextResponse(
            id=ctx.id,
            role=ctx.role,
            name=ctx.name,
            school_id=ctx.school_ids[0] if ctx.school_ids else None,
            school_ids=list(ctx.school_ids),
            class_ids=list(ctx.class_ids),
            student_ids=list(ctx.student_ids),
        )

    async def _account(self, ctx: CallerContext) -> Optional[Any]:
        if ctx.role.is_administrative:
            return await self.db.get(Administration, ctx.id)
        model = {Role.TEACHER: Teacher, Role.STUDENT: Student, Role.PARENT: Parent}[ctx.role]
        return await self.db.get(model, ctx.id)

    async def change_password(self, ctx: CallerContext, current_password: str, new_password: str) -> None:
        account = await self._account(ctx)
        if account is None:
            raise NotFoundError("Account not found")
        if not verify_password(current_password, account.password_hash):
            raise ValidationError(
                "Current password is incorrect",
                details=[{"field": "current_password", "message": "Current password is incorrect"}]
            )
        if current_password == new_password:
            raise ValidationError(
                "New password must differ from the current password",
                details=[{"field": "new_password", "message": "Password unchanged"}]
            )

        account.password_hash = get_password_hash(new_password)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        logger.info("Password changed", extra={"user_id": ctx.id, "role": ctx.role.value})
