from typing import Optional
from datetime import datetime
from pydantic import BaseModel, field_validator

from collegestack.modules.catalog.vocabulary import SEMESTER_BUCKETS


class ProfileBase(BaseModel):
    username: str
    nickname: Optional[str] = None
    role: str
    course: Optional[str] = None
    semester: Optional[str] = None


class ProfileUpdate(BaseModel):
    course: Optional[str] = None
    semester: Optional[str] = None

    @field_validator("semester")
    @classmethod
    def validate_semester(cls, v):
        if v is not None and v not in SEMESTER_BUCKETS:
            raise ValueError(f"Semester must be one of: {', '.join(SEMESTER_BUCKETS)}")
        return v


class NicknameUpdate(BaseModel):
    nickname: str

    @field_validator("nickname")
    @classmethod
    def strip_nickname(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Please enter a valid nickname")
        return v


class Profile(ProfileBase):
    """Profile returned to client"""
    id: str
    email: str
    nickname_changed: bool = False
    created_at: datetime

    model_config = {"from_attributes": True}


class ProfileSummary(BaseModel):
    """Public view of a profile (no email)"""
    id: str
    username: str
    nickname: Optional[str] = None
    role: str

    model_config = {"from_attributes": True}


class ProfileStats(BaseModel):
    posts: int = 0
    comments: int = 0
