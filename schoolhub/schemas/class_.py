# schemas/class_.py
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from schoolhub.schemas.common import SCHOOL_ID_ALIASES


class ClassCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    category: str = Field(min_length=1, max_length=50)
    level: Optional[str] = Field(None, max_length=50)
    capacity: Optional[int] = Field(None, ge=1)
    section: Optional[str] = Field(None, max_length=50)
    form_master_id: Optional[int] = None
    school_id: Optional[int] = Field(None, validation_alias=SCHOOL_ID_ALIASES)


class ClassUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    level: Optional[str] = Field(None, max_length=50)
    capacity: Optional[int] = Field(None, ge=1)
    section: Optional[str] = Field(None, max_length=50)
    form_master_id: Optional[int] = None


class ClassResponse(BaseModel):
    id: int
    name: str
    category: str
    level: Optional[str] = None
    capacity: Optional[int] = None
    section: Optional[str] = None
    form_master_id: Optional[int] = None
    school_id: int
    student_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ClassMember(BaseModel):
    id: int
    firstname: str
    surname: str
    admission_number: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ClassDetailResponse(ClassResponse):
    form_master: Optional[ClassMember] = None
    students: List[ClassMember] = Field(default_factory=list)
    lesson_count: int = 0
