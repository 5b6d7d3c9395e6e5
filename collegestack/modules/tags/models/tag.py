from sqlalchemy import Column, String, DateTime, ForeignKey

from collegestack.core.clock import utcnow
from collegestack.db.session import Base


class Tag(Base):
    __tablename__ = "tags"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, unique=True, index=True, nullable=False)
    created_at = Column(DateTime, default=utcnow)


class PostTag(Base):
    __tablename__ = "posts_tags"

    post_id = Column(String, ForeignKey("posts.id"), primary_key=True)
    tag_id = Column(String, ForeignKey("tags.id"), primary_key=True)
