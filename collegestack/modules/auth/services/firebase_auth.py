"""Firebase authentication service for Google Sign-In"""
import logging
import os
from typing import Any, Dict, Optional, Tuple

import firebase_admin
from firebase_admin import auth, credentials
from firebase_admin.exceptions import FirebaseError
from google.auth.exceptions import GoogleAuthError
from sqlalchemy.orm import Session

from collegestack.core.config import settings
from collegestack.core.errors import CollegeStackError, ErrorKind
from collegestack.core.security import verify_email_domain
from collegestack.modules.auth.schemas.auth import AuthResult, GoogleSignInRequest
from collegestack.modules.auth.services.auth import get_or_create_profile, issue_session

logger = logging.getLogger("app")

# Firebase initialization state
_firebase_initialized = False
_firebase_init_attempts = 0
_firebase_max_attempts = 3

DEV_TEST_TOKEN = "test_firebase_token"


def initialize_firebase() -> bool:
    """Initialize the Firebase app on first use, giving up after a few failed attempts"""
    global _firebase_initialized, _firebase_init_attempts

    if _firebase_initialized:
        return True

    if _firebase_init_attempts >= _firebase_max_attempts:
        logger.error(f"Failed to initialize Firebase after {_firebase_max_attempts} attempts")
        return False

    _firebase_init_attempts += 1

    try:
        service_account_path = settings.FIREBASE_SERVICE_ACCOUNT_PATH

        if os.path.exists(service_account_path):
            cred = credentials.Certificate(service_account_path)
            firebase_admin.initialize_app(cred)
            logger.info(f"Firebase initialized with service account from {service_account_path}")
        else:
            firebase_admin.initialize_app()
            logger.warning("Firebase initialized without explicit credentials")

        _firebase_initialized = True
        return True
    except (ValueError, FirebaseError, GoogleAuthError, OSError) as e:
        logger.error(f"Failed to initialize Firebase (attempt {_firebase_init_attempts}): {e}")
        return False


def verify_firebase_token(token: str) -> Tuple[bool, Optional[Dict[str, Any]]]:
    """Verifies Firebase ID token and extracts user data"""
    # Development mode test token
    if settings.ENVIRONMENT == "development" and token == DEV_TEST_TOKEN:
        logger.warning("DEVELOPMENT MODE: Using test Firebase token")
        return True, {
            "uid": "test_user_id",
            "email": "test@example.com",
            "email_verified": True,
            "name": "Test User",
        }

    if not initialize_firebase():
        logger.error("Cannot verify token: Firebase not initialized")
        return False, None

    try:
        logger.info(f"Verifying Firebase token, length: {len(token) if token else 0}")
        decoded_token = auth.verify_id_token(token)
    except (ValueError, FirebaseError, GoogleAuthError) as e:
        logger.error(f"Firebase token verification failed ({type(e).__name__}): {e}")
        return False, None

    logger.info(f"Firebase token verified successfully for user: {decoded_token.get('email')}")
    return True, {
        "uid": decoded_token.get("uid"),
        "email": decoded_token.get("email"),
        "email_verified": decoded_token.get("email_verified", False),
        "name": decoded_token.get("name"),
    }


def authenticate_with_google(db: Session, google_signin: GoogleSignInRequest) -> AuthResult:
    """Authenticates a profile with Google Sign-In credentials"""
    success, google_data = verify_firebase_token(google_signin.firebase_token)
    if not success or not google_data:
        raise CollegeStackError(ErrorKind.AUTHENTICATION_REQUIRED, "Invalid Firebase token")

    token_email = (google_data.get("email") or "").lower()
    if not token_email:
        raise CollegeStackError(ErrorKind.VALIDATION, "Email is required for Google authentication")

    request_email = google_signin.email
    if request_email and request_email != token_email:
        logger.warning(f"Email mismatch: {request_email} vs {token_email}")
        raise CollegeStackError(ErrorKind.AUTHENTICATION_REQUIRED, "Email mismatch between request and token")

    if not verify_email_domain(token_email):
        raise CollegeStackError(ErrorKind.VALIDATION, "Email domain is not allowed")

    profile, is_new_user = get_or_create_profile(
        db,
        email=token_email,
        role=google_signin.role,
        auth_provider="google",
    )
    if not profile.is_active:
        raise CollegeStackError(ErrorKind.PERMISSION_DENIED, "Inactive user")

    logger.info(f"Google authentication successful for profile ID: {profile.id}")
    return issue_session(profile, is_new_user)
