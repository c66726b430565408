# schemas/announcement.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from schoolhub.schemas.common import SCHOOL_ID_ALIASES


class AnnouncementCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    date: datetime
    class_id: Optional[int] = None
    school_id: Optional[int] = Field(None, validation_alias=SCHOOL_ID_ALIASES)


class AnnouncementUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    date: Optional[datetime] = None
    class_id: Optional[int] = None


class AnnouncementResponse(BaseModel):
    id: int
    title: str
    description: str
    date: datetime
    class_id: Optional[int] = None
    school_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
