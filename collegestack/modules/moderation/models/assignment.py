from sqlalchemy import Column, String, DateTime, ForeignKey

from collegestack.core.clock import utcnow
from collegestack.db.session import Base

# slot id -> display label
TIME_SLOTS = {
    "morning": "Morning (9 AM - 12 PM)",
    "afternoon": "Afternoon (12 PM - 3 PM)",
    "evening": "Evening (3 PM - 6 PM)",
}


class ModeratorAssignment(Base):
    __tablename__ = "moderator_assignments"

    id = Column(String, primary_key=True, index=True)
    student_id = Column(String, ForeignKey("profiles.id"), index=True)
    time_slot = Column(String, unique=True, nullable=False)  # one active assignment per slot
    assigned_by = Column(String, ForeignKey("profiles.id"))
    created_at = Column(DateTime, default=utcnow)
