from typing import List
from pydantic import BaseModel, Field, field_validator


def _strip_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Name cannot be empty")
    return v


class CourseCreate(BaseModel):
    name: str

    strip_name = field_validator("name")(_strip_name)


class Course(BaseModel):
    id: str
    name: str

    model_config = {"from_attributes": True}


class SubjectCreate(BaseModel):
    name: str
    course_id: str
    semester: int = Field(..., ge=1, le=8)

    strip_name = field_validator("name")(_strip_name)


class Subject(BaseModel):
    id: str
    name: str
    course_id: str
    semester: int

    model_config = {"from_attributes": True}


class Vocabulary(BaseModel):
    courses: List[str]
    semesters: List[str]
    general_categories: List[str]


class SubjectsFor(BaseModel):
    course: str
    semester: str
    subjects: List[str]
