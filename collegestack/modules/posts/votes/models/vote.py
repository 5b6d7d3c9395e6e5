from sqlalchemy import Column, String, DateTime, ForeignKey

from collegestack.core.clock import utcnow
from collegestack.db.session import Base


class UserVote(Base):
    """Presence of a row means the user has voted for the post"""
    __tablename__ = "user_votes"

    post_id = Column(String, ForeignKey("posts.id"), primary_key=True)
    user_id = Column(String, ForeignKey("profiles.id"), primary_key=True)
    created_at = Column(DateTime, default=utcnow)
