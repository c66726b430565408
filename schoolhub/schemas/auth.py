# schemas/auth.py
from typing import List, Optional
from pydantic import BaseModel, Field

from schoolhub.schemas.enums import Role


class LoginRequest(BaseModel):
    username: str = Field(min_length=1, description="Email, username or admission number")
    password: str = Field(min_length=1)


class SessionUser(BaseModel):
    id: int
    role: Role
    name: str
    school_id: Optional[int] = None
    school_ids: List[int] = Field(default_factory=list)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: SessionUser


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=8, max_length=72)


class CallerContextResponse(SessionUser):
    class_ids: List[int] = Field(default_factory=list)
    student_ids: List[int] = Field(default_factory=list)
