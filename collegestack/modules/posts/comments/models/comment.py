from sqlalchemy import Column, String, DateTime, Text, ForeignKey

from collegestack.core.clock import utcnow
from collegestack.db.session import Base


class Comment(Base):
    __tablename__ = "comments"

    id = Column(String, primary_key=True, index=True)
    content = Column(Text, nullable=False)
    user_id = Column(String, ForeignKey("profiles.id"))
    post_id = Column(String, ForeignKey("posts.id"), index=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
