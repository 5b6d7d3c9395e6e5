"""
Tag filter and semester grouping.

Posts are anything with a ``tags`` attribute holding the post's tag names in
the order the store returns them (sorted by name). All functions here are
pure.
"""
from collections import OrderedDict
from typing import Dict, Iterable, List, Optional, Sequence, TypeVar

from collegestack.modules.catalog.vocabulary import (
    ALL_COURSES,
    ALL_SEMESTERS,
    ALL_SUBJECTS,
    MISCELLANEOUS,
    SEMESTER_BUCKETS,
    static_subjects_for,
)

P = TypeVar("P")


def _matches(selected: str, wildcard: str, tags: Sequence[str]) -> bool:
    return selected == wildcard or selected in tags


def filter_posts(posts: Iterable[P], course: str, semester: str, subject: str) -> List[P]:
    """Posts whose tags satisfy the course, semester and subject selections"""
    return [
        post for post in posts
        if _matches(course, ALL_COURSES, post.tags)
        and _matches(semester, ALL_SEMESTERS, post.tags)
        and _matches(subject, ALL_SUBJECTS, post.tags)
    ]


def semester_bucket(tags: Sequence[str]) -> str:
    """First semester tag (Miscellaneous included) among the tags, else Miscellaneous"""
    for tag in tags:
        if tag in SEMESTER_BUCKETS:
            return tag
    return MISCELLANEOUS


def group_by_semester(posts: Iterable[P]) -> Dict[str, List[P]]:
    """Semester label -> posts, in semester order, Miscellaneous last, no empty buckets"""
    buckets: Dict[str, List[P]] = OrderedDict((label, []) for label in SEMESTER_BUCKETS)
    for post in posts:
        buckets[semester_bucket(post.tags)].append(post)
    return OrderedDict((label, items) for label, items in buckets.items() if items)


def subjects_for(course: str, semester: str, extra: Optional[Iterable[str]] = None) -> List[str]:
    """Static subjects of a course+semester plus any admin-managed ones"""
    if not course or course == ALL_COURSES or not semester or semester == ALL_SEMESTERS:
        return []
    subjects = static_subjects_for(course, semester)
    for name in extra or []:
        if name not in subjects:
            subjects.append(name)
    return subjects


def resolve_subject(course: str, semester: str, subject: str, extra: Optional[Iterable[str]] = None) -> str:
    """The subject selection, reset to All Subjects when it does not belong to the course+semester"""
    if not subject or subject == ALL_SUBJECTS:
        return ALL_SUBJECTS
    if subject in subjects_for(course, semester, extra):
        return subject
    return ALL_SUBJECTS
