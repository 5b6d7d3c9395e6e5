from datetime import datetime
from pydantic import BaseModel, field_validator


class TagCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Tag name cannot be empty")
        return v


class Tag(BaseModel):
    id: str
    name: str
    created_at: datetime

    model_config = {"from_attributes": True}
