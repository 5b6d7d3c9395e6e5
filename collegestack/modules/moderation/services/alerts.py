"""
Unanswered-post alerting.

A post is stale when it is older than the threshold (strictly) and nobody has
commented on it yet. Labels for the alert come from the post's sorted tag
names.
"""
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from collegestack.core.clock import utcnow
from collegestack.core.config import settings
from collegestack.modules.catalog.services.catalog import get_course_names
from collegestack.modules.catalog.vocabulary import (
    COURSE_CODES,
    MISCELLANEOUS,
    SEMESTER_LABELS,
    is_structural,
)
from collegestack.modules.moderation.schemas.moderation import UnansweredPost, UnansweredPostsAlert
from collegestack.modules.posts.models.post import Post
from collegestack.modules.posts.services.post import get_comment_counts
from collegestack.modules.profiles.models.profile import Profile
from collegestack.modules.tags.services.tag import get_tag_names_for_posts

UNKNOWN_AUTHOR = "Unknown User"


def unanswered_threshold() -> timedelta:
    return timedelta(minutes=settings.UNANSWERED_THRESHOLD_MINUTES)


def is_stale(created_at: datetime, comment_count: int, now: datetime, threshold: Optional[timedelta] = None) -> bool:
    if threshold is None:
        threshold = unanswered_threshold()
    return comment_count == 0 and now - created_at > threshold


def derive_labels(tags: Sequence[str], courses: Optional[Sequence[str]] = None) -> Dict[str, Optional[str]]:
    """Course, semester and subject labels; courses defaults to the fixed course codes"""
    if courses is None:
        courses = COURSE_CODES
    course = next((t for t in tags if t in courses), None)
    semester = next((t for t in tags if t in SEMESTER_LABELS or t == MISCELLANEOUS), None)
    subject = next((t for t in tags if not is_structural(t, courses)), None)
    return {"course": course, "semester": semester, "subject": subject}


def find_unanswered_posts(db: Session, now: Optional[datetime] = None) -> List[UnansweredPost]:
    now = now or utcnow()
    threshold = unanswered_threshold()

    candidates = (
        db.query(Post)
        .filter(Post.created_at < now - threshold)
        .order_by(Post.created_at.asc())
        .all()
    )
    post_ids = [post.id for post in candidates]
    comment_counts = get_comment_counts(db, post_ids)
    stale = [p for p in candidates if is_stale(p.created_at, comment_counts.get(p.id, 0), now, threshold)]
    if not stale:
        return []

    tag_map = get_tag_names_for_posts(db, [p.id for p in stale])
    courses = get_course_names(db)
    author_ids = {p.author_id for p in stale}
    usernames = dict(db.query(Profile.id, Profile.username).filter(Profile.id.in_(author_ids)).all())

    return [
        UnansweredPost(
            post_id=post.id,
            title=post.title,
            author=usernames.get(post.author_id) or UNKNOWN_AUTHOR,
            created_at=post.created_at,
            **derive_labels(tag_map.get(post.id, []), courses),
        )
        for post in stale
    ]


def get_unanswered_alert(db: Session, now: Optional[datetime] = None) -> UnansweredPostsAlert:
    posts = find_unanswered_posts(db, now)
    return UnansweredPostsAlert(
        count=len(posts),
        threshold_minutes=settings.UNANSWERED_THRESHOLD_MINUTES,
        posts=posts,
    )
