# schemas/student.py
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from schoolhub.schemas.common import SCHOOL_ID_ALIASES
from schoolhub.schemas.enums import GenderValue


class StudentCreateRequest(BaseModel):
    username: Optional[str] = Field(None, max_length=100)
    firstname: str = Field(min_length=1, max_length=100)
    surname: str = Field(min_length=1, max_length=100)
    othername: Optional[str] = Field(None, max_length=100)
    birthday: Optional[date] = None
    gender: Optional[GenderValue] = None
    religion: Optional[str] = Field(None, max_length=50)
    bloodgroup: Optional[str] = Field(None, max_length=5)
    house: Optional[str] = Field(None, max_length=50)
    student_type: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None
    state: Optional[str] = Field(None, max_length=100)
    lga: Optional[str] = Field(None, max_length=100)
    section: Optional[str] = Field(None, max_length=50)
    password: Optional[str] = Field(None, min_length=8, max_length=72)
    active: bool = True
    admission_date: Optional[date] = None
    class_id: int
    parent_id: int
    school_id: Optional[int] = Field(None, validation_alias=SCHOOL_ID_ALIASES)


class StudentUpdateRequest(BaseModel):
    username: Optional[str] = Field(None, max_length=100)
    firstname: Optional[str] = Field(None, min_length=1, max_length=100)
    surname: Optional[str] = Field(None, min_length=1, max_length=100)
    othername: Optional[str] = Field(None, max_length=100)
    birthday: Optional[date] = None
    gender: Optional[GenderValue] = None
    religion: Optional[str] = Field(None, max_length=50)
    bloodgroup: Optional[str] = Field(None, max_length=5)
    house: Optional[str] = Field(None, max_length=50)
    student_type: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None
    state: Optional[str] = Field(None, max_length=100)
    lga: Optional[str] = Field(None, max_length=100)
    section: Optional[str] = Field(None, max_length=50)
    password: Optional[str] = Field(None, min_length=8, max_length=72)
    active: Optional[bool] = None
    admission_date: Optional[date] = None
    class_id: Optional[int] = None
    parent_id: Optional[int] = None


class StudentResponse(BaseModel):
    id: int
    username: Optional[str] = None
    firstname: str
    surname: str
    othername: Optional[str] = None
    birthday: Optional[date] = None
    gender: Optional[str] = None
    religion: Optional[str] = None
    bloodgroup: Optional[str] = None
    house: Optional[str] = None
    student_type: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    state: Optional[str] = None
    lga: Optional[str] = None
    section: Optional[str] = None
    avatar: Optional[str] = None
    active: bool
    admission_date: Optional[date] = None
    admission_number: str
    class_id: int
    parent_id: int
    school_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
