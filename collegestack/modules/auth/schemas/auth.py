from typing import Literal, Optional
from pydantic import BaseModel, EmailStr, field_validator

from collegestack.modules.catalog.vocabulary import SEMESTER_BUCKETS
from collegestack.modules.profiles.schemas.profile import Profile


def _normalize_email(email: Optional[str]) -> Optional[str]:
    """Normalize email to lowercase."""
    return email.lower() if email else None


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class MagicLinkRequest(BaseModel):
    email: EmailStr
    role: Literal["student", "teacher"] = "student"
    # Pending course/semester chosen before the email round trip
    course: Optional[str] = None
    semester: Optional[str] = None

    normalize_email = field_validator("email")(_normalize_email)

    @field_validator("semester")
    @classmethod
    def validate_semester(cls, v):
        if v is not None and v not in SEMESTER_BUCKETS:
            raise ValueError(f"Semester must be one of: {', '.join(SEMESTER_BUCKETS)}")
        return v


class MagicLinkSent(BaseModel):
    email: str
    delivered: bool
    message: str = "Check your email for the sign-in link"


class MagicLinkCallback(BaseModel):
    token: str


class GoogleSignInRequest(BaseModel):
    firebase_token: str
    email: Optional[EmailStr] = None
    role: Literal["student", "teacher"] = "student"

    normalize_email = field_validator("email")(_normalize_email)


class AuthResult(Token):
    profile_id: str
    role: str
    redirect: str
    is_new_user: bool = False


class SessionInfo(BaseModel):
    """Current identity plus the derived role/moderator flags"""
    profile: Profile
    is_teacher: bool
    is_admin: bool
    is_moderator: bool
    moderator_time_slot: Optional[str] = None
