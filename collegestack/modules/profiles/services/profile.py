from typing import List, Optional
import logging

from sqlalchemy.orm import Session
from sqlalchemy import func

from collegestack.core.errors import CollegeStackError, ErrorKind
from collegestack.core.events import session_events, PROFILE_UPDATED
from collegestack.modules.catalog.services.catalog import ensure_known_course
from collegestack.modules.profiles.models.profile import Profile, ROLES
from collegestack.modules.profiles.schemas.profile import ProfileUpdate, ProfileStats
from collegestack.modules.posts.models.post import Post
from collegestack.modules.posts.comments.models.comment import Comment

logger = logging.getLogger("app")


def get_profile(db: Session, profile_id: str) -> Optional[Profile]:
    """Get profile by ID"""
    return db.query(Profile).filter(Profile.id == profile_id).first()


def get_profile_by_email(db: Session, email: str) -> Optional[Profile]:
    """Get profile by email"""
    return db.query(Profile).filter(Profile.email == email.lower()).first()


def get_profiles_by_role(db: Session, role: str) -> List[Profile]:
    """List profiles with the given role, ordered by username"""
    if role not in ROLES:
        raise CollegeStackError(ErrorKind.VALIDATION, f"Role must be one of: {', '.join(ROLES)}")
    return db.query(Profile).filter(Profile.role == role).order_by(Profile.username).all()


def generate_unique_username(db: Session, email: str) -> str:
    """Generates a unique username based on the email local part"""
    username = email.split("@")[0] or "user"
    base_username = username
    suffix = 1

    while db.query(Profile).filter(Profile.username == username).first():
        username = f"{base_username}{suffix}"
        suffix += 1

    return username


def update_profile(db: Session, profile: Profile, profile_in: ProfileUpdate) -> Profile:
    """Update course/semester"""
    update_data = profile_in.model_dump(exclude_unset=True)
    ensure_known_course(db, update_data.get("course"))
    for field, value in update_data.items():
        setattr(profile, field, value)

    db.commit()
    db.refresh(profile)
    session_events.publish(PROFILE_UPDATED, {"profile_id": profile.id, "fields": list(update_data)})
    return profile


def set_nickname(db: Session, profile: Profile, nickname: str) -> Profile:
    """Set the nickname. It can only be chosen once."""
    if profile.nickname_changed:
        raise CollegeStackError(ErrorKind.CONFLICT, "Nickname has already been set and cannot be changed again")

    profile.nickname = nickname
    profile.nickname_changed = True
    db.commit()
    db.refresh(profile)
    logger.info(f"Nickname set for profile {profile.id}")
    session_events.publish(PROFILE_UPDATED, {"profile_id": profile.id, "fields": ["nickname"]})
    return profile


def get_profile_stats(db: Session, profile_id: str) -> ProfileStats:
    """Post and comment counts for the student dashboard"""
    post_count = db.query(func.count(Post.id)).filter(Post.author_id == profile_id).scalar() or 0
    comment_count = db.query(func.count(Comment.id)).filter(Comment.user_id == profile_id).scalar() or 0
    return ProfileStats(posts=post_count, comments=comment_count)
