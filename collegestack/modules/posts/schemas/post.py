from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, field_validator

from collegestack.modules.profiles.schemas.profile import ProfileSummary


def _not_blank(v: Optional[str]) -> Optional[str]:
    if v is not None and not v.strip():
        raise ValueError("Field cannot be empty")
    return v


class Attachment(BaseModel):
    name: str
    url: str
    size: int
    key: str


class PostBase(BaseModel):
    title: str
    content: str
    tags: List[str] = []

    check_not_blank = field_validator("title", "content")(_not_blank)


class PostCreate(PostBase):
    pass


class PostUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    # None leaves the tags alone, a list replaces them
    tags: Optional[List[str]] = None

    check_not_blank = field_validator("title", "content")(_not_blank)


class Post(PostBase):
    """Post returned to client, with author, sorted tags and comment count"""
    id: str
    preview: Optional[str] = None
    votes: int = 0
    author_id: str
    author: Optional[ProfileSummary] = None
    comment_count: int = 0
    attachments: List[Attachment] = []
    # Only filled in for a signed-in reader of a single post
    voted: Optional[bool] = None
    created_at: datetime
    updated_at: datetime


class FailedStep(BaseModel):
    step: str
    error: str


class PostDeleteResult(BaseModel):
    post_id: str
    deleted: bool = True
    failed_steps: List[FailedStep] = []
