"""Admin-managed courses and subjects, on top of the fixed vocabulary"""
from typing import List, Optional
import logging
import uuid

from sqlalchemy.orm import Session

from collegestack.core.errors import CollegeStackError, ErrorKind
from collegestack.modules.catalog.models.catalog import Course, Subject
from collegestack.modules.catalog.schemas.catalog import CourseCreate, SubjectCreate, Vocabulary
from collegestack.modules.catalog.vocabulary import COURSE_CODES, GENERAL_CATEGORIES, SEMESTER_BUCKETS, SEMESTER_LABELS

logger = logging.getLogger("app")


def semester_number(label: str) -> Optional[int]:
    """"Semester 3" -> 3; None for anything else"""
    if label in SEMESTER_LABELS:
        return int(label.split()[-1])
    return None


def get_courses(db: Session) -> List[Course]:
    return db.query(Course).order_by(Course.name).all()


def create_course(db: Session, course_in: CourseCreate) -> Course:
    if db.query(Course).filter(Course.name == course_in.name).first():
        raise CollegeStackError(ErrorKind.CONFLICT, f"Course '{course_in.name}' already exists")

    course = Course(id=str(uuid.uuid4()), name=course_in.name)
    db.add(course)
    db.commit()
    db.refresh(course)
    logger.info(f"Created course {course.name}")
    return course


def delete_course(db: Session, course_id: str) -> None:
    """Delete a course together with its subjects"""
    course = db.query(Course).filter(Course.id == course_id).first()
    if not course:
        raise CollegeStackError(ErrorKind.NOT_FOUND, "Course not found")

    try:
        deleted_subjects = db.query(Subject).filter(Subject.course_id == course_id).delete(synchronize_session=False)
        db.delete(course)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Deleted course {course_id} and {deleted_subjects} subject(s)")


def get_subjects(db: Session, course_id: Optional[str] = None) -> List[Subject]:
    query = db.query(Subject)
    if course_id:
        query = query.filter(Subject.course_id == course_id)
    return query.order_by(Subject.semester, Subject.name).all()


def create_subject(db: Session, subject_in: SubjectCreate) -> Subject:
    if not db.query(Course).filter(Course.id == subject_in.course_id).first():
        raise CollegeStackError(ErrorKind.NOT_FOUND, "Course not found")

    subject = Subject(
        id=str(uuid.uuid4()),
        name=subject_in.name,
        course_id=subject_in.course_id,
        semester=subject_in.semester,
    )
    db.add(subject)
    db.commit()
    db.refresh(subject)
    logger.info(f"Created subject {subject.name} (semester {subject.semester})")
    return subject


def delete_subject(db: Session, subject_id: str) -> None:
    subject = db.query(Subject).filter(Subject.id == subject_id).first()
    if not subject:
        raise CollegeStackError(ErrorKind.NOT_FOUND, "Subject not found")
    db.delete(subject)
    db.commit()


def get_custom_subjects(db: Session, course: str, semester: str) -> List[str]:
    """Names of admin-managed subjects for a course name and semester label"""
    number = semester_number(semester)
    if number is None or not course:
        return []
    rows = (
        db.query(Subject.name)
        .join(Course, Course.id == Subject.course_id)
        .filter(Course.name == course, Subject.semester == number)
        .order_by(Subject.name)
        .all()
    )
    return [name for (name,) in rows]


def get_course_names(db: Session) -> List[str]:
    """Fixed course codes followed by admin-managed courses"""
    names = list(COURSE_CODES)
    for course in get_courses(db):
        if course.name not in names:
            names.append(course.name)
    return names


def ensure_known_course(db: Session, course: Optional[str]) -> None:
    """Reject a course that is neither a fixed code nor an admin-managed course"""
    if course is None:
        return
    names = get_course_names(db)
    if course not in names:
        raise CollegeStackError(ErrorKind.VALIDATION, f"Course must be one of: {', '.join(names)}")


def get_vocabulary(db: Session) -> Vocabulary:
    return Vocabulary(
        courses=get_course_names(db),
        semesters=list(SEMESTER_BUCKETS),
        general_categories=list(GENERAL_CATEGORIES),
    )
