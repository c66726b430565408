# schemas/attendance.py
from datetime import date as Date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from schoolhub.schemas.common import SCHOOL_ID_ALIASES


class AttendanceMarkRequest(BaseModel):
    """Creates the record for the student and day, or updates its ``present`` flag."""
    student_id: int
    date: Date
    present: bool
    school_id: Optional[int] = Field(None, validation_alias=SCHOOL_ID_ALIASES)


class AttendanceUpdateRequest(BaseModel):
    present: bool


class AttendanceStudent(BaseModel):
    id: int
    firstname: str
    surname: str
    admission_number: str
    class_id: int

    model_config = ConfigDict(from_attributes=True)


class AttendanceResponse(BaseModel):
    id: int
    student_id: int
    date: Date
    present: bool
    school_id: int
    student: Optional[AttendanceStudent] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
