from typing import List
from pydantic import BaseModel

from collegestack.modules.posts.schemas.post import Post


class SemesterGroup(BaseModel):
    semester: str
    posts: List[Post]


class SemesterView(BaseModel):
    """Effective filter selection plus the matching posts.

    When the semester selection is "All Semesters" the posts are also
    returned grouped by semester.
    """
    course: str
    semester: str
    subject: str
    subjects: List[str] = []
    grouped: bool = False
    total: int = 0
    posts: List[Post] = []
    groups: List[SemesterGroup] = []
