from sqlalchemy import Column, Integer, String, DateTime, ForeignKey

from collegestack.core.clock import utcnow
from collegestack.db.session import Base


class Course(Base):
    __tablename__ = "courses"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=utcnow)


class Subject(Base):
    __tablename__ = "subjects"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    course_id = Column(String, ForeignKey("courses.id"), index=True)
    semester = Column(Integer, nullable=False)  # 1-8
    created_at = Column(DateTime, default=utcnow)
