from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, Path, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.database import get_db
from schoolhub.core.dependencies import delete_ids, get_caller_context, list_params
from schoolhub.core.scope import CallerContext
from schoolhub.schemas.common import DeleteResponse, ListResponse
from schoolhub.schemas.school import (
    SchoolCreateRequest, SchoolDetailResponse, SchoolResponse, SchoolUpdateRequest,
)
from schoolhub.services.base_service import ListParams
from schoolhub.services.school_service import SchoolService
from schoolhub.services.storage_service import StorageService, get_storage, read_image

router = APIRouter(
    prefix="/api/schools",
    tags=["Schools"],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not found"}
    }
)


def get_school_service(
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage)
) -> SchoolService:
    return SchoolService(db, storage)


def school_form(
    name: Optional[str] = Form(None),
    subtitle: Optional[str] = Form(None),
    school_type: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    contact_person: Optional[str] = Form(None),
    contact_person_email: Optional[str] = Form(None),
    contact_person_phone: Optional[str] = Form(None),
    facebook: Optional[str] = Form(None),
    youtube: Optional[str] = Form(None),
    reg_number_prepend: Optional[str] = Form(None),
    reg_number_append: Optional[str] = Form(None),
) -> Dict[str, Any]:
    """Multipart school fields; only the ones sent are returned."""
    fields = locals()
    return {key: value for key, value in fields.items() if value is not None}


async def _logo(logo: Optional[UploadFile]):
    if logo is None or not logo.filename:
        return None, None
    return await read_image(logo), logo.filename


@router.get("", response_model=ListResponse[SchoolResponse])
async def list_schools(
    params: ListParams = Depends(list_params),
    ctx: CallerContext = Depends(get_caller_context),
    service: SchoolService = Depends(get_school_service)
):
    schools, total = await service.list(ctx, params)
    return ListResponse[SchoolResponse](
        data=[SchoolResponse.model_validate(s) for s in schools],
        total=total
    )


@router.post("", response_model=SchoolResponse, status_code=status.HTTP_201_CREATED)
async def create_school(
    fields: Dict[str, Any] = Depends(school_form),
    logo: Optional[UploadFile] = File(None),
    ctx: CallerContext = Depends(get_caller_context),
    service: SchoolService = Depends(get_school_service)
):
    """Create a school from a multipart form with an optional logo image."""
    data = SchoolCreateRequest(**fields)
    content, filename = await _logo(logo)
    return await service.create(ctx, data, content, filename)


@router.delete("", response_model=DeleteResponse)
async def delete_schools(
    ids: List[int] = Depends(delete_ids),
    ctx: CallerContext = Depends(get_caller_context),
    service: SchoolService = Depends(get_school_service)
):
    return await service.delete_many(ctx, ids)


@router.get("/{school_id}", response_model=SchoolDetailResponse)
async def get_school(
    school_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: SchoolService = Depends(get_school_service)
):
    return await service.detail(ctx, school_id)


@router.put("/{school_id}", response_model=SchoolResponse)
async def update_school(
    school_id: int = Path(..., ge=1),
    fields: Dict[str, Any] = Depends(school_form),
    logo: Optional[UploadFile] = File(None),
    ctx: CallerContext = Depends(get_caller_context),
    service: SchoolService = Depends(get_school_service)
):
    data = SchoolUpdateRequest(**fields)
    content, filename = await _logo(logo)
    return await service.update(ctx, school_id, data, content, filename)


@router.delete("/{school_id}", response_model=DeleteResponse)
async def delete_school(
    school_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: SchoolService = Depends(get_school_service)
):
    return await service.delete_many(ctx, [school_id])
