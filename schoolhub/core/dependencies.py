# schoolhub/core/dependencies.py
from typing import List, Optional

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.config import settings
from schoolhub.core.database import get_db
from schoolhub.core.errors import AuthenticationError, ValidationError
from schoolhub.core.scope import Caller, CallerContext
from schoolhub.core.security import verify_token
from schoolhub.schemas.enums import Role
from schoolhub.services.base_service import ListParams
from schoolhub.services.context_service import CallerContextService

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_caller(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Caller:
    """Resolve the caller from the Bearer header, falling back to the session cookie."""
    token = credentials.credentials if credentials else request.cookies.get(settings.COOKIE_NAME)
    if token and token.startswith("Bearer "):
        token = token[len("Bearer "):]
    if not token:
        raise AuthenticationError("Not authenticated")

    payload = verify_token(token)
    try:
        caller = Caller(id=int(payload["sub"]), role=Role(payload["role"]))
    except (KeyError, TypeError, ValueError):
        raise AuthenticationError("Could not validate credentials", error_code="TOKEN_ERROR")

    request.state.user_id = caller.id
    return caller


async def get_caller_context(
    caller: Caller = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db),
) -> CallerContext:
    return await CallerContextService(db).load(caller)


def list_params(
    search: Optional[str] = Query(None, description="Case-insensitive text search"),
    page: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=500),
    schoolid: Optional[int] = Query(None, description="School filter (super only)"),
    schoolId: Optional[int] = Query(None, include_in_schema=False),
) -> ListParams:
    return ListParams(
        search=search,
        page=page,
        limit=limit,
        school_id=schoolid if schoolid is not None else schoolId,
    )


def delete_ids(
    ids: Optional[List[str]] = Query(None, description="Ids to delete, repeated or comma separated"),
) -> List[int]:
    """Accepts ``?ids=1&ids=2`` as well as ``?ids=1,2``."""
    parsed = []
    for value in ids or []:
        for part in value.split(","):
            part = part.strip()
            if not part:
                continue
            try:
                parsed.append(int(part))
            except ValueError:
                raise ValidationError(
                    "Invalid ID format",
                    details=[{"field": "ids", "message": f"'{part}' is not an integer"}]
                )
    return parsed
