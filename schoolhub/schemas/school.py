# schemas/school.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field

# Admission numbers are PREFIX/YEAR/NNNNN, so the prefix itself may not contain '/'
REG_PREFIX_PATTERN = r"^[A-Za-z0-9_-]+$"


class SchoolCreateRequest(BaseModel):
    name: str = Field(min_length=2, max_length=255)
    subtitle: Optional[str] = Field(None, max_length=255)
    school_type: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None
    contact_person: Optional[str] = Field(None, max_length=255)
    contact_person_email: Optional[EmailStr] = None
    contact_person_phone: Optional[str] = Field(None, max_length=20)
    facebook: Optional[str] = Field(None, max_length=255)
    youtube: Optional[str] = Field(None, max_length=255)
    reg_number_prepend: Optional[str] = Field(None, max_length=20, pattern=REG_PREFIX_PATTERN)
    reg_number_append: Optional[str] = Field(None, max_length=20)


class SchoolUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    subtitle: Optional[str] = Field(None, max_length=255)
    school_type: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None
    contact_person: Optional[str] = Field(None, max_length=255)
    contact_person_email: Optional[EmailStr] = None
    contact_person_phone: Optional[str] = Field(None, max_length=20)
    facebook: Optional[str] = Field(None, max_length=255)
    youtube: Optional[str] = Field(None, max_length=255)
    reg_number_prepend: Optional[str] = Field(None, max_length=20, pattern=REG_PREFIX_PATTERN)
    reg_number_append: Optional[str] = Field(None, max_length=20)


class SchoolResponse(BaseModel):
    id: int
    name: str
    subtitle: Optional[str] = None
    school_type: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    logo: Optional[str] = None
    contact_person: Optional[str] = None
    contact_person_email: Optional[str] = None
    contact_person_phone: Optional[str] = None
    facebook: Optional[str] = None
    youtube: Optional[str] = None
    reg_number_prepend: Optional[str] = None
    reg_number_append: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SchoolDetailResponse(SchoolResponse):
    student_count: int = 0
    teacher_count: int = 0
    class_count: int = 0
