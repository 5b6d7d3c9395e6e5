from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, JSON

from collegestack.core.clock import utcnow
from collegestack.db.session import Base


class Post(Base):
    __tablename__ = "posts"

    id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    preview = Column(Text)
    votes = Column(Integer, default=0, nullable=False)  # only the vote procedure changes this
    author_id = Column(String, ForeignKey("profiles.id"), index=True)
    attachments = Column(JSON, nullable=True)  # [{name, url, size, key}]
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
