# schemas/common.py
from typing import Any, Dict, Generic, List, Optional, TypeVar
from pydantic import AliasChoices, BaseModel, Field

T = TypeVar("T")

# Accepts school_id, schoolid and schoolId in request bodies
SCHOOL_ID_ALIASES = AliasChoices("school_id", "schoolid", "schoolId")


class ListResponse(BaseModel, Generic[T]):
    data: List[T]
    total: int


class BlockedItem(BaseModel):
    id: int
    reason: str
    name: Optional[str] = None
    students: Optional[int] = None
    relationships: Optional[Dict[str, Any]] = None


class DeleteResponse(BaseModel):
    deleted: int
    blocked: List[BlockedItem] = Field(default_factory=list)
    cascaded: Optional[Dict[str, int]] = None
    message: str


class MessageResponse(BaseModel):
    message: str
