from sqlalchemy.orm import Session

from collegestack.modules.catalog.services.catalog import get_custom_subjects
from collegestack.modules.catalog.vocabulary import ALL_SEMESTERS
from collegestack.modules.posts.services.post import build_post_views, get_posts
from collegestack.modules.semester_view.schemas.semester_view import SemesterGroup, SemesterView
from collegestack.modules.semester_view.services.grouping import (
    filter_posts,
    group_by_semester,
    resolve_subject,
    subjects_for,
)


def build_semester_view(db: Session, course: str, semester: str, subject: str) -> SemesterView:
    extra = get_custom_subjects(db, course, semester)
    subject = resolve_subject(course, semester, subject, extra)

    posts = filter_posts(build_post_views(db, get_posts(db)), course, semester, subject)
    view = SemesterView(
        course=course,
        semester=semester,
        subject=subject,
        subjects=subjects_for(course, semester, extra),
        total=len(posts),
        posts=posts,
    )
    if semester == ALL_SEMESTERS:
        view.grouped = True
        view.groups = [
            SemesterGroup(semester=label, posts=items)
            for label, items in group_by_semester(posts).items()
        ]
    return view
