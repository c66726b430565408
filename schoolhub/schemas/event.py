# schemas/event.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from schoolhub.schemas.common import SCHOOL_ID_ALIASES


def ends_after(start: datetime, end: datetime) -> bool:
    # naive values are compared as-is; mixed values compare on wall-clock time
    if (start.tzinfo is None) != (end.tzinfo is None):
        start, end = start.replace(tzinfo=None), end.replace(tzinfo=None)
    return end > start


class EventCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    class_id: Optional[int] = None
    school_id: Optional[int] = Field(None, validation_alias=SCHOOL_ID_ALIASES)

    @model_validator(mode="after")
    def check_times(self) -> "EventCreateRequest":
        if not ends_after(self.start_time, self.end_time):
            raise ValueError("End time must be after start time")
        return self


class EventUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    class_id: Optional[int] = None


class EventResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    class_id: Optional[int] = None
    school_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
