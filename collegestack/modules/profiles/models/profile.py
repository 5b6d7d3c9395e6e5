from sqlalchemy import Boolean, Column, String, DateTime

from collegestack.core.clock import utcnow
from collegestack.db.session import Base

ROLE_STUDENT = "student"
ROLE_TEACHER = "teacher"
ROLE_ADMIN = "admin"
ROLES = (ROLE_STUDENT, ROLE_TEACHER, ROLE_ADMIN)


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String, primary_key=True, index=True)  # same as the auth identity
    email = Column(String, unique=True, index=True, nullable=False)
    username = Column(String, unique=True, index=True, nullable=False)
    nickname = Column(String, nullable=True)
    nickname_changed = Column(Boolean, default=False, nullable=False)  # nickname can be set once
    role = Column(String, nullable=False, default=ROLE_STUDENT)
    course = Column(String, nullable=True)
    semester = Column(String, nullable=True)
    auth_provider = Column(String, default="magic_link")
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
