from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from collegestack.db.session import get_db
from collegestack.modules.catalog.vocabulary import (
    ALL_COURSES,
    ALL_SEMESTERS,
    ALL_SUBJECTS,
    SEMESTER_BUCKETS,
)
from collegestack.modules.catalog.services.catalog import get_course_names
from collegestack.modules.semester_view.schemas.semester_view import SemesterView
from collegestack.modules.semester_view.services.semester_view import build_semester_view

router = APIRouter()


@router.get("", response_model=SemesterView)
def read_semester_view(
    db: Session = Depends(get_db),
    course: str = Query(ALL_COURSES),
    semester: str = Query(ALL_SEMESTERS),
    subject: str = Query(ALL_SUBJECTS),
) -> Any:
    """
    Posts filtered by course, semester and subject tags. The effective
    selection is echoed back so the client can keep it in the URL.
    """
    if course != ALL_COURSES and course not in get_course_names(db):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown course '{course}'",
        )
    if semester != ALL_SEMESTERS and semester not in SEMESTER_BUCKETS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown semester '{semester}'",
        )
    return build_semester_view(db, course, semester, subject)
