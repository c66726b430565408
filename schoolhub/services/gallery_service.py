# schoolhub/services/gallery_service.py
from typing import List, Optional, Tuple

from schoolhub.core.permissions import Action, Resource
from schoolhub.core.scope import CallerContext, resolve_scope, resolve_target_school
from schoolhub.models import GalleryItem
from schoolhub.schemas.enums import GalleryCategory
from schoolhub.schemas.gallery import GalleryCreateRequest, GalleryUpdateRequest
from schoolhub.services.base_service import BaseService, ListParams

GALLERY_FOLDER = "gallery"


class GalleryService(BaseService):
    model = GalleryItem
    resource = Resource.GALLERY
    label = "Gallery item"
    search_fields = ("title", "description")
    file_column = "image_url"

    def ordering(self):
        return (GalleryItem.order.asc(), GalleryItem.created_at.desc(), GalleryItem.id.desc())

    async def list_gallery(
        self,
        ctx: CallerContext,
        params: ListParams,
        category: Optional[GalleryCategory] = None,
        is_active: Optional[bool] = None
    ) -> Tuple[List[GalleryItem], int]:
        filters = []
        if category is not None:
            filters.append(GalleryItem.category == category)
        if is_active is not None:
            filters.append(GalleryItem.is_active == is_active)
        return await self.list(ctx, params, filters)

    async def create(
        self,
        ctx: CallerContext,
        data: GalleryCreateRequest,
        content: bytes,
        filename: Optional[str]
    ) -> GalleryItem:
        resolve_scope(ctx, self.resource, Action.CREATE)
        school_id = data.school_id
        if not (ctx.is_super and school_id is None):
            school_id = resolve_target_school(ctx, school_id)
            await self.get_school(school_id)

        image_url = await self.storage.upload(content, filename, GALLERY_FOLDER)
        item = GalleryItem(**data.model_dump(exclude={"school_id"}), image_url=image_url, school_id=school_id)
        try:
            return await self.save(item)
        except Exception:
            await self.discard_file(image_url)
            raise

    async def update(
        self,
        ctx: CallerContext,
        item_id: int,
        data: GalleryUpdateRequest,
        content: Optional[bytes] = None,
        filename: Optional[str] = None
    ) -> GalleryItem:
        item = await self.get(ctx, item_id, Action.UPDATE)
        self.apply_changes(item, data.model_dump(exclude_unset=True))
        if content is None:
            return await self.save(item)

        previous = item.image_url
        reference = await self.storage.upload(content, filename, GALLERY_FOLDER)
        item.image_url = reference
        try:
            item = await self.save(item)
        except Exception:
            await self.discard_file(reference)
            raise
        await self.discard_file(previous)
        return item
