# Implements security-related functionality:
# JWT access token generation and verification
# Signed single-purpose magic link tokens (passwordless sign-in)
# Email domain verification for restricting sign-in
# Provides core security functions used by the authentication module

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union
import logging
import uuid

from jose import jwt, JWTError, ExpiredSignatureError

from collegestack.core.config import settings

logger = logging.getLogger("app")

ACCESS_TOKEN_TYPE = "access"
MAGIC_LINK_TOKEN_TYPE = "magic_link"


def create_access_token(subject: Union[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        "exp": expire,
        "sub": str(subject),
        "jti": uuid.uuid4().hex,
        "type": ACCESS_TOKEN_TYPE,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_magic_link_token(
    email: str,
    role: Optional[str],
    course: Optional[str] = None,
    semester: Optional[str] = None,
) -> str:
    """Token carried by the emailed sign-in link. The role claim and any pending
    course/semester selection travel inside it across the email round trip."""
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.MAGIC_LINK_EXPIRE_MINUTES)
    to_encode = {
        "exp": expire,
        "sub": email.lower(),
        "jti": uuid.uuid4().hex,
        "type": MAGIC_LINK_TOKEN_TYPE,
        "role": role,
        "course": course,
        "semester": semester,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str, expected_type: str) -> Optional[Dict[str, Any]]:
    """Return the payload of a valid token of the given type, None otherwise"""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except ExpiredSignatureError:
        logger.warning(f"{expected_type} token expired")
        return None
    except JWTError as e:
        logger.warning(f"JWT verification error: {e}")
        return None

    if payload.get("type") != expected_type:
        logger.warning(f"Token type mismatch: expected {expected_type}, got {payload.get('type')}")
        return None
    if payload.get("sub") is None:
        logger.warning("Token payload missing 'sub' field")
        return None
    return payload


def verify_email_domain(email: str) -> bool:
    if not settings.ALLOWED_EMAIL_DOMAINS:
        return True
    domain = email.split("@")[-1].lower()
    return domain in [d.lower() for d in settings.ALLOWED_EMAIL_DOMAINS]
