# schemas/subject.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from schoolhub.schemas.common import SCHOOL_ID_ALIASES


class SubjectCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    category: Optional[str] = Field(None, max_length=50)
    section: Optional[str] = Field(None, max_length=50)
    teacher_id: Optional[int] = None
    school_id: Optional[int] = Field(None, validation_alias=SCHOOL_ID_ALIASES)


class SubjectUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[str] = Field(None, max_length=50)
    section: Optional[str] = Field(None, max_length=50)
    teacher_id: Optional[int] = None


class SubjectResponse(BaseModel):
    id: int
    name: str
    category: Optional[str] = None
    section: Optional[str] = None
    teacher_id: Optional[int] = None
    school_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
