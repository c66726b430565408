# schemas/parent.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from schoolhub.schemas.common import SCHOOL_ID_ALIASES
from schoolhub.schemas.enums import GenderValue


class ParentCreateRequest(BaseModel):
    username: Optional[str] = Field(None, max_length=100)
    title: Optional[str] = Field(None, max_length=20)
    firstname: str = Field(min_length=1, max_length=100)
    surname: str = Field(min_length=1, max_length=100)
    othername: Optional[str] = Field(None, max_length=100)
    gender: Optional[GenderValue] = None
    occupation: Optional[str] = Field(None, max_length=100)
    religion: Optional[str] = Field(None, max_length=50)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None
    state: Optional[str] = Field(None, max_length=100)
    lga: Optional[str] = Field(None, max_length=100)
    password: Optional[str] = Field(None, min_length=8, max_length=72)
    active: bool = True
    school_id: Optional[int] = Field(None, validation_alias=SCHOOL_ID_ALIASES)


class ParentUpdateRequest(BaseModel):
    username: Optional[str] = Field(None, max_length=100)
    title: Optional[str] = Field(None, max_length=20)
    firstname: Optional[str] = Field(None, min_length=1, max_length=100)
    surname: Optional[str] = Field(None, min_length=1, max_length=100)
    othername: Optional[str] = Field(None, max_length=100)
    gender: Optional[GenderValue] = None
    occupation: Optional[str] = Field(None, max_length=100)
    religion: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None
    state: Optional[str] = Field(None, max_length=100)
    lga: Optional[str] = Field(None, max_length=100)
    password: Optional[str] = Field(None, min_length=8, max_length=72)
    active: Optional[bool] = None


class ParentResponse(BaseModel):
    id: int
    username: Optional[str] = None
    title: Optional[str] = None
    firstname: str
    surname: str
    othername: Optional[str] = None
    gender: Optional[str] = None
    occupation: Optional[str] = None
    religion: Optional[str] = None
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    state: Optional[str] = None
    lga: Optional[str] = None
    avatar: Optional[str] = None
    active: bool
    school_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
