from sqlalchemy import Column, String, DateTime

from collegestack.core.clock import utcnow
from collegestack.db.session import Base


class RevokedToken(Base):
    """Access tokens invalidated by sign-out and magic links already exchanged, keyed by their jti claim"""
    __tablename__ = "revoked_tokens"

    jti = Column(String, primary_key=True)
    profile_id = Column(String, index=True)
    revoked_at = Column(DateTime, default=utcnow)
