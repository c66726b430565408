# schemas/term.py
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from schoolhub.schemas.common import SCHOOL_ID_ALIASES
from schoolhub.schemas.enums import Term, TermStatus
from schoolhub.schemas.grade import SESSION_PATTERN


class TermCreateRequest(BaseModel):
    session: str = Field(pattern=SESSION_PATTERN, examples=["2024/2025"])
    term: Term
    start: date
    end: date
    next_term: Optional[date] = None
    days_open: Optional[int] = Field(None, ge=1)
    status: TermStatus = TermStatus.ACTIVE
    school_id: Optional[int] = Field(None, validation_alias=SCHOOL_ID_ALIASES)

    @model_validator(mode="after")
    def check_dates(self) -> "TermCreateRequest":
        if self.end <= self.start:
            raise ValueError("Term end must be after its start")
        return self


class TermUpdateRequest(BaseModel):
    session: Optional[str] = Field(None, pattern=SESSION_PATTERN)
    term: Optional[Term] = None
    start: Optional[date] = None
    end: Optional[date] = None
    next_term: Optional[date] = None
    days_open: Optional[int] = Field(None, ge=1)
    status: Optional[TermStatus] = None


class TermResponse(BaseModel):
    id: int
    session: str
    term: Term
    start: date
    end: date
    next_term: Optional[date] = None
    days_open: int
    status: TermStatus
    school_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
