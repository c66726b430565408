from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.database import get_db
from schoolhub.core.dependencies import delete_ids, get_caller_context, list_params
from schoolhub.core.scope import CallerContext
from schoolhub.schemas.common import DeleteResponse, ListResponse
from schoolhub.schemas.enums import GalleryCategory
from schoolhub.schemas.gallery import GalleryCreateRequest, GalleryResponse, GalleryUpdateRequest
from schoolhub.services.base_service import ListParams
from schoolhub.services.gallery_service import GalleryService
from schoolhub.services.storage_service import StorageService, get_storage, read_image

router = APIRouter(
    prefix="/api/gallery",
    tags=["Gallery"],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not found"}
    }
)


def get_gallery_service(
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage)
) -> GalleryService:
    return GalleryService(db, storage)


@router.get("", response_model=ListResponse[GalleryResponse])
async def list_gallery(
    category: Optional[GalleryCategory] = Query(None),
    is_active: Optional[bool] = Query(None),
    params: ListParams = Depends(list_params),
    ctx: CallerContext = Depends(get_caller_context),
    service: GalleryService = Depends(get_gallery_service)
):
    """Gallery items in display order."""
    items, total = await service.list_gallery(ctx, params, category, is_active)
    return ListResponse[GalleryResponse](
        data=[GalleryResponse.model_validate(item) for item in items],
        total=total
    )


@router.post("", response_model=GalleryResponse, status_code=status.HTTP_201_CREATED)
async def create_gallery_item(
    title: str = Form(...),
    description: Optional[str] = Form(None),
    category: GalleryCategory = Form(GalleryCategory.GENERAL),
    is_active: bool = Form(True),
    order: int = Form(0),
    school_id: Optional[int] = Form(None),
    image: UploadFile = File(...),
    ctx: CallerContext = Depends(get_caller_context),
    service: GalleryService = Depends(get_gallery_service)
):
    data = GalleryCreateRequest(
        title=title,
        description=description,
        category=category,
        is_active=is_active,
        order=order,
        school_id=school_id,
    )
    content = await read_image(image)
    return await service.create(ctx, data, content, image.filename)


@router.delete("", response_model=DeleteResponse)
async def delete_gallery_items(
    ids: List[int] = Depends(delete_ids),
    ctx: CallerContext = Depends(get_caller_context),
    service: GalleryService = Depends(get_gallery_service)
):
    return await service.delete_many(ctx, ids)


@router.get("/{item_id}", response_model=GalleryResponse)
async def get_gallery_item(
    item_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: GalleryService = Depends(get_gallery_service)
):
    return await service.get(ctx, item_id)


@router.put("/{item_id}", response_model=GalleryResponse)
async def update_gallery_item(
    item_id: int = Path(..., ge=1),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[GalleryCategory] = Form(None),
    is_active: Optional[bool] = Form(None),
    order: Optional[int] = Form(None),
    image: Optional[UploadFile] = File(None),
    ctx: CallerContext = Depends(get_caller_context),
    service: GalleryService = Depends(get_gallery_service)
):
    fields = {
        "title": title,
        "description": description,
        "category": category,
        "is_active": is_active,
        "order": order,
    }
    data = GalleryUpdateRequest(**{key: value for key, value in fields.items() if value is not None})
    content = await read_image(image) if image is not None and image.filename else None
    return await service.update(ctx, item_id, data, content, image.filename if content else None)


@router.delete("/{item_id}", response_model=DeleteResponse)
async def delete_gallery_item(
    item_id: int = Path(..., ge=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: GalleryService = Depends(get_gallery_service)
):
    return await service.delete_many(ctx, [item_id])
