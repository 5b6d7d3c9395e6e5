# Error taxonomy shared by services and routers.
# Services raise CollegeStackError with an ErrorKind; a single exception handler
# turns it into a JSON body the client can act on (including the redirect for
# authentication and role failures).

import logging
from enum import Enum
from typing import Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger("app")


class ErrorKind(str, Enum):
    AUTHENTICATION_REQUIRED = "authentication_required"
    SESSION_EXPIRED = "session_expired"
    MISSING_ROLE = "missing_role"
    ROLE_MISMATCH = "role_mismatch"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    CONFLICT = "conflict"
    VALIDATION = "validation"
    UNSUPPORTED_FILE_TYPE = "unsupported_file_type"
    FILE_TOO_LARGE = "file_too_large"
    STORAGE_FAILURE = "storage_failure"
    EMAIL_DELIVERY_FAILURE = "email_delivery_failure"


_STATUS_CODES = {
    ErrorKind.AUTHENTICATION_REQUIRED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.SESSION_EXPIRED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.MISSING_ROLE: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.ROLE_MISMATCH: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNSUPPORTED_FILE_TYPE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.FILE_TOO_LARGE: status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    ErrorKind.STORAGE_FAILURE: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.EMAIL_DELIVERY_FAILURE: status.HTTP_502_BAD_GATEWAY,
}

# Where the client should navigate after the failure
_REDIRECTS = {
    ErrorKind.AUTHENTICATION_REQUIRED: "/login",
    ErrorKind.SESSION_EXPIRED: "/login",
    ErrorKind.MISSING_ROLE: "/login",
    ErrorKind.ROLE_MISMATCH: "/",
}


class CollegeStackError(Exception):
    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self.kind]

    @property
    def redirect(self) -> Optional[str]:
        return _REDIRECTS.get(self.kind)


async def collegestack_error_handler(request: Request, exc: CollegeStackError) -> JSONResponse:
    logger.warning(f"{exc.kind.value} on {request.method} {request.url.path}: {exc.message}")
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "kind": exc.kind.value, "redirect": exc.redirect},
        headers=headers,
    )
