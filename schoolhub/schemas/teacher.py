# schemas/teacher.py
from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from schoolhub.schemas.common import SCHOOL_ID_ALIASES
from schoolhub.schemas.enums import GenderValue


class TeacherCreateRequest(BaseModel):
    username: Optional[str] = Field(None, max_length=100)
    title: Optional[str] = Field(None, max_length=20)
    firstname: str = Field(min_length=1, max_length=100)
    surname: str = Field(min_length=1, max_length=100)
    othername: Optional[str] = Field(None, max_length=100)
    birthday: Optional[date] = None
    gender: Optional[GenderValue] = None
    bloodgroup: Optional[str] = Field(None, max_length=5)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None
    state: Optional[str] = Field(None, max_length=100)
    lga: Optional[str] = Field(None, max_length=100)
    section: Optional[str] = Field(None, max_length=50)
    password: Optional[str] = Field(None, min_length=8, max_length=72)
    active: bool = True
    subject_ids: List[int] = Field(default_factory=list)
    school_id: Optional[int] = Field(None, validation_alias=SCHOOL_ID_ALIASES)


class TeacherUpdateRequest(BaseModel):
    username: Optional[str] = Field(None, max_length=100)
    title: Optional[str] = Field(None, max_length=20)
    firstname: Optional[str] = Field(None, min_length=1, max_length=100)
    surname: Optional[str] = Field(None, min_length=1, max_length=100)
    othername: Optional[str] = Field(None, max_length=100)
    birthday: Optional[date] = None
    gender: Optional[GenderValue] = None
    bloodgroup: Optional[str] = Field(None, max_length=5)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None
    state: Optional[str] = Field(None, max_length=100)
    lga: Optional[str] = Field(None, max_length=100)
    section: Optional[str] = Field(None, max_length=50)
    password: Optional[str] = Field(None, min_length=8, max_length=72)
    active: Optional[bool] = None


class TeacherResponse(BaseModel):
    id: int
    username: Optional[str] = None
    title: Optional[str] = None
    firstname: str
    surname: str
    othername: Optional[str] = None
    birthday: Optional[date] = None
    gender: Optional[str] = None
    bloodgroup: Optional[str] = None
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    state: Optional[str] = None
    lga: Optional[str] = None
    section: Optional[str] = None
    avatar: Optional[str] = None
    active: bool
    school_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
