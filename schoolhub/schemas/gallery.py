# schemas/gallery.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from schoolhub.schemas.enums import GalleryCategory


class GalleryCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    category: GalleryCategory = GalleryCategory.GENERAL
    is_active: bool = True
    order: int = Field(0, ge=0)
    school_id: Optional[int] = None


class GalleryUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[GalleryCategory] = None
    is_active: Optional[bool] = None
    order: Optional[int] = Field(None, ge=0)


class GalleryResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    image_url: str
    category: GalleryCategory
    is_active: bool
    order: int
    school_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
