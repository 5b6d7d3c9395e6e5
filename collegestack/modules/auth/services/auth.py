import logging
import smtplib
import uuid
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from collegestack.core.config import settings
from collegestack.core.errors import CollegeStackError, ErrorKind
from collegestack.core.events import session_events, SIGNED_IN, SIGNED_OUT
from collegestack.core.mailer import email_service
from collegestack.core.security import (
    ACCESS_TOKEN_TYPE,
    MAGIC_LINK_TOKEN_TYPE,
    create_access_token,
    create_magic_link_token,
    decode_token,
    verify_email_domain,
)
from collegestack.modules.auth.models.revoked_token import RevokedToken
from collegestack.modules.auth.schemas.auth import AuthResult, MagicLinkRequest, MagicLinkSent, SessionInfo
from collegestack.modules.catalog.services.catalog import ensure_known_course
from collegestack.modules.moderation.services.assignment import get_assignment_for_student
from collegestack.modules.profiles.models.profile import Profile, ROLE_ADMIN, ROLE_STUDENT, ROLE_TEACHER
from collegestack.modules.profiles.schemas.profile import Profile as ProfileSchema
from collegestack.modules.profiles.services.profile import generate_unique_username, get_profile, get_profile_by_email

logger = logging.getLogger("app")

# Where each role lands after signing in
ROLE_LANDING = {
    ROLE_TEACHER: "/teacher",
    ROLE_STUDENT: "/student",
    ROLE_ADMIN: "/admin",
}

# Roles a brand-new account may claim; admins are promoted out of band
SELF_SERVICE_ROLES = (ROLE_STUDENT, ROLE_TEACHER)


def request_magic_link(db: Session, link_in: MagicLinkRequest) -> MagicLinkSent:
    """Issue a sign-in token and email the callback link"""
    email = link_in.email.lower()
    if not verify_email_domain(email):
        raise CollegeStackError(ErrorKind.VALIDATION, "Email domain is not allowed")
    ensure_known_course(db, link_in.course)

    # An existing account keeps its role whatever the request says
    existing = get_profile_by_email(db, email)
    role = existing.role if existing else link_in.role

    token = create_magic_link_token(email, role, link_in.course, link_in.semester)
    magic_link = f"{settings.FRONTEND_URL}/auth/callback?token={token}"

    try:
        delivered = email_service.send_magic_link(email, magic_link)
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Failed to send magic link to {email}: {e}")
        raise CollegeStackError(ErrorKind.EMAIL_DELIVERY_FAILURE, "Failed to send the sign-in email")

    logger.info(f"Magic link issued for {email} (role={role}, delivered={delivered})")
    return MagicLinkSent(email=email, delivered=delivered)


def get_or_create_profile(
    db: Session,
    email: str,
    role: Optional[str],
    course: Optional[str] = None,
    semester: Optional[str] = None,
    auth_provider: str = "magic_link",
) -> Tuple[Profile, bool]:
    """Gets the profile for an email, creating it on first sign-in"""
    profile = get_profile_by_email(db, email)
    if profile:
        return profile, False

    if not role:
        raise CollegeStackError(ErrorKind.MISSING_ROLE, "No role found for this account, please sign up again")
    if role not in SELF_SERVICE_ROLES:
        raise CollegeStackError(ErrorKind.VALIDATION, f"Role must be one of: {', '.join(SELF_SERVICE_ROLES)}")

    profile = Profile(
        id=str(uuid.uuid4()),
        email=email.lower(),
        username=generate_unique_username(db, email.lower()),
        role=role,
        course=course,
        semester=semester,
        auth_provider=auth_provider,
        is_active=True,
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)
    logger.info(f"Created profile {profile.id} ({profile.username}, {profile.role})")
    return profile, True


def issue_session(profile: Profile, is_new_user: bool = False) -> AuthResult:
    access_token = create_access_token(profile.id)
    session_events.publish(SIGNED_IN, {"profile_id": profile.id, "role": profile.role, "is_new_user": is_new_user})
    return AuthResult(
        access_token=access_token,
        token_type="bearer",
        profile_id=profile.id,
        role=profile.role,
        redirect=ROLE_LANDING.get(profile.role, "/"),
        is_new_user=is_new_user,
    )


def complete_magic_link(db: Session, token: str) -> AuthResult:
    """Exchange a magic link token for an access token"""
    payload = decode_token(token, MAGIC_LINK_TOKEN_TYPE)
    if not payload:
        raise CollegeStackError(ErrorKind.SESSION_EXPIRED, "Invalid or expired sign-in link")

    jti = payload.get("jti")
    if not jti or db.query(RevokedToken).filter(RevokedToken.jti == jti).first():
        raise CollegeStackError(ErrorKind.SESSION_EXPIRED, "This sign-in link has already been used")

    # The link is marked used in the same commit that creates the profile
    used_link = RevokedToken(jti=jti)
    db.add(used_link)
    try:
        profile, is_new_user = get_or_create_profile(
            db,
            email=payload["sub"],
            role=payload.get("role"),
            course=payload.get("course"),
            semester=payload.get("semester"),
        )
        used_link.profile_id = profile.id
        db.commit()
    except IntegrityError:
        db.rollback()
        raise CollegeStackError(ErrorKind.SESSION_EXPIRED, "This sign-in link has already been used")
    except CollegeStackError:
        db.rollback()
        raise

    if not profile.is_active:
        raise CollegeStackError(ErrorKind.PERMISSION_DENIED, "Inactive user")

    logger.info(f"Magic link sign-in for profile {profile.id}")
    return issue_session(profile, is_new_user)


def resolve_access_token(db: Session, token: str) -> Tuple[Profile, dict]:
    """Profile and token payload for a bearer token, or an authentication error"""
    payload = decode_token(token, ACCESS_TOKEN_TYPE)
    if not payload:
        raise CollegeStackError(ErrorKind.SESSION_EXPIRED, "Invalid token or token expired")

    jti = payload.get("jti")
    if jti and db.query(RevokedToken).filter(RevokedToken.jti == jti).first():
        raise CollegeStackError(ErrorKind.SESSION_EXPIRED, "Session has been signed out")

    profile = get_profile(db, payload["sub"])
    if not profile:
        raise CollegeStackError(ErrorKind.AUTHENTICATION_REQUIRED, "Profile not found")
    if not profile.is_active:
        raise CollegeStackError(ErrorKind.PERMISSION_DENIED, "Inactive user")
    return profile, payload


def sign_out(db: Session, token: str) -> None:
    profile, payload = resolve_access_token(db, token)
    db.add(RevokedToken(jti=payload.get("jti") or token[-32:], profile_id=profile.id))
    db.commit()
    logger.info(f"Profile {profile.id} signed out")
    session_events.publish(SIGNED_OUT, {"profile_id": profile.id})


def build_session(db: Session, profile: Profile) -> SessionInfo:
    """Session view with role and moderator flags"""
    moderator_time_slot = None
    if profile.role == ROLE_STUDENT:
        assignment = get_assignment_for_student(db, profile.id)
        moderator_time_slot = assignment.time_slot if assignment else None

    return SessionInfo(
        profile=ProfileSchema.model_validate(profile),
        is_teacher=profile.role == ROLE_TEACHER,
        is_admin=profile.role == ROLE_ADMIN,
        is_moderator=moderator_time_slot is not None,
        moderator_time_slot=moderator_time_slot,
    )
