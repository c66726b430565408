from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.database import get_db
from schoolhub.core.dependencies import delete_ids, get_caller_context, list_params
from schoolhub.core.scope import CallerContext
from schoolhub.schemas.common import DeleteResponse, ListResponse
from schoolhub.schemas.enums import TermStatus
from schoolhub.schemas.term import TermCreateRequest, TermResponse, TermUpdateRequest
from schoolhub.services.base_service import ListParams
from schoolhub.services.term_service import TermService

router = APIRouter(
    prefix="/api/terms",
    tags=["Terms"],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not found"}
    }
)


def get_term_service(db: AsyncSession = Depends(get_db)) -> TermService:
    return TermService(db)


@router.get("", response_model=ListResponse[TermResponse])
async def list_terms(
    term_status: Optional[TermStatus] = Query(None, alias="status"),
    session: Optional[str] = Query(None, examples=["2024/2025"]),
    params: ListParams = Depends(list_params),
    ctx: CallerContext = Depends(get_caller_context),
    service: TermService = Depends(get_term_service)
):
    """Terms with the active one first, then newest first."""
    terms, total = await service.list_terms(ctx, params, term_status, session)
    return ListResponse[TermResponse](
        data=[TermResponse.model_validate(t) for t in terms],
        total=total
    )


@router.post("", response_model=TermResponse, status_code=status.HTTP_201_CREATED)
async def create_term(
    data: TermCreateRequest,
    ctx: CallerContext = Depends(get_caller_context),
    service: TermService = Depends(get_term_service)
):
    return await service.create(ctx, data)


@router.delete("", response_model=DeleteResponse)
async def delete_terms(
    ids: List[int] = Depends(delete_ids),
    ctx: CallerContext = Depends(get_caller_context),
    service: TermService = Depends(get_term_service)
):
    return await service.delete_many(ctx, ids)


@router.get("/current", response_model=TermResponse)
async def get_current_term(
    schoolid: Optional[int] = Query(None),
    ctx: CallerContext = Depends(get_caller_context),
    service: TermService = Depends(get_term_service)
):
    return await service.get_current(ctx, schoolid)


@router.get("/{term_id}", response_model=TermResponse)
async def get_term(
    term_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: TermService = Depends(get_term_service)
):
    return await service.get(ctx, term_id)


@router.put("/{term_id}", response_model=TermResponse)
async def update_term(
    data: TermUpdateRequest,
    term_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: TermService = Depends(get_term_service)
):
    return await service.update(ctx, term_id, data)


@router.delete("/{term_id}", response_model=DeleteResponse)
async def delete_term(
    term_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: TermService = Depends(get_term_service)
):
    return await service.delete_many(ctx, [term_id])
