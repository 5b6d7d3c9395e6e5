from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from collegestack.core.config import settings
from collegestack.core.errors import CollegeStackError, ErrorKind
from collegestack.db.session import get_db
from collegestack.modules.auth.services.auth import resolve_access_token
from collegestack.modules.profiles.models.profile import Profile

# Bearer token scheme; missing tokens are reported by get_current_profile
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/callback", auto_error=False)


def get_current_token(token: Optional[str] = Depends(oauth2_scheme)) -> str:
    if not token:
        raise CollegeStackError(ErrorKind.AUTHENTICATION_REQUIRED, "Not authenticated")
    return token


def get_current_profile(
    db: Session = Depends(get_db),
    token: str = Depends(get_current_token),
) -> Profile:
    """
    Dependency for getting the signed-in profile
    """
    profile, _ = resolve_access_token(db, token)
    return profile


def get_optional_profile(
    db: Session = Depends(get_db),
    token: Optional[str] = Depends(oauth2_scheme),
) -> Optional[Profile]:
    """
    Dependency for endpoints that read the same for guests and signed-in users
    """
    if not token:
        return None
    try:
        profile, _ = resolve_access_token(db, token)
    except CollegeStackError:
        return None
    return profile


def require_roles(*roles: str) -> Callable[..., Profile]:
    """
    Dependency factory restricting an endpoint to the given roles
    """
    def checker(current_profile: Profile = Depends(get_current_profile)) -> Profile:
        if current_profile.role not in roles:
            raise CollegeStackError(
                ErrorKind.ROLE_MISMATCH,
                f"This page requires one of the roles: {', '.join(roles)}",
            )
        return current_profile

    return checker
