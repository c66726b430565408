# schemas/administration.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from schoolhub.schemas.common import SCHOOL_ID_ALIASES
from schoolhub.schemas.enums import AdminRole


class AdministrationCreateRequest(BaseModel):
    username: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: Optional[str] = Field(None, min_length=8, max_length=72)
    role: AdminRole = AdminRole.ADMIN
    section: Optional[str] = Field(None, max_length=50)
    active: bool = True
    school_id: Optional[int] = Field(None, validation_alias=SCHOOL_ID_ALIASES)


class AdministrationUpdateRequest(BaseModel):
    username: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=8, max_length=72)
    role: Optional[AdminRole] = None
    section: Optional[str] = Field(None, max_length=50)
    active: Optional[bool] = None
    school_id: Optional[int] = Field(None, validation_alias=SCHOOL_ID_ALIASES)


class AdministrationResponse(BaseModel):
    id: int
    username: str
    email: str
    role: AdminRole
    section: Optional[str] = None
    active: bool
    avatar: Optional[str] = None
    school_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
