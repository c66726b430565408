# schemas/news.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from schoolhub.schemas.common import SCHOOL_ID_ALIASES
from schoolhub.schemas.enums import NewsCategory, NewsStatus


class NewsCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    excerpt: Optional[str] = None
    author: str = Field(min_length=1, max_length=255)
    category: NewsCategory = NewsCategory.GENERAL
    status: NewsStatus = NewsStatus.DRAFT
    featured: bool = False
    image: Optional[str] = Field(None, max_length=512)
    read_time: Optional[int] = Field(None, ge=1)
    published_at: Optional[datetime] = None
    school_id: Optional[int] = Field(None, validation_alias=SCHOOL_ID_ALIASES)


class NewsUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1)
    excerpt: Optional[str] = None
    author: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[NewsCategory] = None
    status: Optional[NewsStatus] = None
    featured: Optional[bool] = None
    image: Optional[str] = Field(None, max_length=512)
    read_time: Optional[int] = Field(None, ge=1)
    published_at: Optional[datetime] = None


class NewsResponse(BaseModel):
    id: int
    title: str
    content: str
    excerpt: Optional[str] = None
    author: str
    category: NewsCategory
    status: NewsStatus
    featured: bool
    image: Optional[str] = None
    read_time: Optional[int] = None
    published_at: Optional[datetime] = None
    school_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
