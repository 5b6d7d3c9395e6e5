from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from collegestack.db.session import get_db
from collegestack.deps import require_roles
from collegestack.modules.catalog.schemas.catalog import (
    Course as CourseSchema,
    CourseCreate,
    Subject as SubjectSchema,
    SubjectCreate,
    SubjectsFor,
    Vocabulary,
)
from collegestack.modules.catalog.services.catalog import (
    create_course,
    create_subject,
    delete_course,
    delete_subject,
    get_courses,
    get_custom_subjects,
    get_subjects,
    get_vocabulary,
)
from collegestack.modules.profiles.models.profile import Profile, ROLE_ADMIN
from collegestack.modules.semester_view.services.grouping import subjects_for

router = APIRouter()

require_admin = require_roles(ROLE_ADMIN)


@router.get("/vocabulary", response_model=Vocabulary)
def read_vocabulary(db: Session = Depends(get_db)) -> Any:
    """Course codes, semester labels and general categories"""
    return get_vocabulary(db)


@router.get("/subjects-for", response_model=SubjectsFor)
def read_subjects_for(
    db: Session = Depends(get_db),
    course: str = Query(...),
    semester: str = Query(...),
) -> Any:
    """Subjects offered for a course in a semester"""
    extra = get_custom_subjects(db, course, semester)
    return SubjectsFor(course=course, semester=semester, subjects=subjects_for(course, semester, extra))


@router.get("/courses", response_model=List[CourseSchema])
def read_courses(
    db: Session = Depends(get_db),
    current_profile: Profile = Depends(require_admin),
) -> Any:
    return get_courses(db)


@router.post("/courses", response_model=CourseSchema, status_code=status.HTTP_201_CREATED)
def add_course(
    *,
    db: Session = Depends(get_db),
    course_in: CourseCreate,
    current_profile: Profile = Depends(require_admin),
) -> Any:
    return create_course(db, course_in)


@router.delete("/courses/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_course(
    course_id: str,
    db: Session = Depends(get_db),
    current_profile: Profile = Depends(require_admin),
) -> None:
    """Delete a course and all of its subjects"""
    delete_course(db, course_id)


@router.get("/subjects", response_model=List[SubjectSchema])
def read_subjects(
    db: Session = Depends(get_db),
    course_id: Optional[str] = Query(None),
    current_profile: Profile = Depends(require_admin),
) -> Any:
    return get_subjects(db, course_id=course_id)


@router.post("/subjects", response_model=SubjectSchema, status_code=status.HTTP_201_CREATED)
def add_subject(
    *,
    db: Session = Depends(get_db),
    subject_in: SubjectCreate,
    current_profile: Profile = Depends(require_admin),
) -> Any:
    return create_subject(db, subject_in)


@router.delete("/subjects/{subject_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_subject(
    subject_id: str,
    db: Session = Depends(get_db),
    current_profile: Profile = Depends(require_admin),
) -> None:
    delete_subject(db, subject_id)
