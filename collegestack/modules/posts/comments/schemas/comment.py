from typing import Optional
from datetime import datetime
from pydantic import BaseModel, field_validator


class CommentCreate(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Comment cannot be empty")
        return v


class Comment(BaseModel):
    """Comment returned to client"""
    id: str
    content: str
    user_id: str
    post_id: str
    username: Optional[str] = None
    nickname: Optional[str] = None
    created_at: datetime
    updated_at: datetime
