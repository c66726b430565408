# schemas/grade.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from schoolhub.schemas.common import SCHOOL_ID_ALIASES
from schoolhub.schemas.enums import Term

SESSION_PATTERN = r"^\d{4}/\d{4}$"


class GradeCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    session: str = Field(pattern=SESSION_PATTERN, examples=["2024/2025"])
    term: Term
    published: bool = False
    section: Optional[str] = Field(None, max_length=50)
    school_id: Optional[int] = Field(None, validation_alias=SCHOOL_ID_ALIASES)


class GradeUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    session: Optional[str] = Field(None, pattern=SESSION_PATTERN)
    term: Optional[Term] = None
    published: Optional[bool] = None
    section: Optional[str] = Field(None, max_length=50)


class GradeResponse(BaseModel):
    id: int
    title: str
    session: str
    term: Term
    published: bool
    section: Optional[str] = None
    school_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
