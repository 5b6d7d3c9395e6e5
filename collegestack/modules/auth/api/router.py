"""Authentication router: magic links, Google Sign-In and the session"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from collegestack.db.session import get_db
from collegestack.deps import get_current_profile, get_current_token
from collegestack.modules.auth.schemas.auth import (
    AuthResult,
    GoogleSignInRequest,
    MagicLinkCallback,
    MagicLinkRequest,
    MagicLinkSent,
    SessionInfo,
)
from collegestack.modules.auth.services.auth import build_session, complete_magic_link, request_magic_link, sign_out
from collegestack.modules.auth.services.firebase_auth import authenticate_with_google
from collegestack.modules.profiles.models.profile import Profile

router = APIRouter()


@router.post("/magic-link", response_model=MagicLinkSent, status_code=status.HTTP_202_ACCEPTED)
def send_magic_link(
    *,
    db: Session = Depends(get_db),
    link_in: MagicLinkRequest,
) -> MagicLinkSent:
    """Email a single-use sign-in link"""
    return request_magic_link(db, link_in)


@router.post("/callback", response_model=AuthResult)
def magic_link_callback(
    *,
    db: Session = Depends(get_db),
    callback_in: MagicLinkCallback,
) -> AuthResult:
    """Exchange the emailed token for an access token and the role landing path"""
    return complete_magic_link(db, callback_in.token)


@router.post("/google-signin", response_model=AuthResult)
def google_signin(
    *,
    db: Session = Depends(get_db),
    google_signin: GoogleSignInRequest,
) -> AuthResult:
    """Authenticate with Google Sign-In"""
    return authenticate_with_google(db, google_signin)


@router.get("/session", response_model=SessionInfo)
def read_session(
    db: Session = Depends(get_db),
    current_profile: Profile = Depends(get_current_profile),
) -> SessionInfo:
    return build_session(db, current_profile)


@router.post("/signout", status_code=status.HTTP_204_NO_CONTENT)
def signout(
    db: Session = Depends(get_db),
    token: str = Depends(get_current_token),
) -> None:
    sign_out(db, token)
