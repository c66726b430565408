# schemas/stats.py
from datetime import date as Date, datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict

from schoolhub.schemas.enums import Role
from schoolhub.schemas.term import TermResponse


class GenderCount(BaseModel):
    gender: Optional[str] = None
    count: int


class AttendanceDay(BaseModel):
    date: Date
    present: int = 0
    absent: int = 0


class ActivityItem(BaseModel):
    id: int
    title: str
    date: datetime
    class_id: Optional[int] = None
    school_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class StatsResponse(BaseModel):
    """Dashboard figures; every count is taken over what the caller may read."""
    role: Role
    counts: Dict[str, int]
    recent: Dict[str, int]
    students_by_gender: List[GenderCount]
    attendance: List[AttendanceDay]
    current_term: Optional[TermResponse] = None
    announcements: List[ActivityItem]
    events: List[ActivityItem]
    generated_at: datetime
