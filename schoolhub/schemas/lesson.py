# schemas/lesson.py
from datetime import datetime, time
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from schoolhub.schemas.common import SCHOOL_ID_ALIASES
from schoolhub.schemas.enums import Weekday


class LessonCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    day: Weekday
    start_time: time
    end_time: time
    class_id: int
    subject_id: int
    teacher_id: int
    school_id: Optional[int] = Field(None, validation_alias=SCHOOL_ID_ALIASES)

    @model_validator(mode="after")
    def check_times(self) -> "LessonCreateRequest":
        if self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")
        return self


class LessonUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    day: Optional[Weekday] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    class_id: Optional[int] = None
    subject_id: Optional[int] = None
    teacher_id: Optional[int] = None


class LessonResponse(BaseModel):
    id: int
    name: str
    day: Weekday
    start_time: time
    end_time: time
    class_id: int
    subject_id: int
    teacher_id: int
    school_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
