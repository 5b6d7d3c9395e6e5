from fastapi import Request
import logging
from starlette.middleware.base import BaseHTTPMiddleware

from collegestack.core.config import settings

logger = logging.getLogger("app")

# Path fragments that always need a bearer token
PROTECTED_PATHS = ("/profiles/me", "/auth/session", "/auth/signout", "/moderation/", "/vote")


class AuthLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        path = request.url.path

        if not request.headers.get("Authorization"):
            if path.startswith(settings.API_V1_STR) and any(p in path for p in PROTECTED_PATHS):
                logger.warning(f"Protected endpoint {path} accessed without auth header")

        response = await call_next(request)

        # Log auth-related status codes
        if response.status_code in [401, 403]:
            logger.warning(f"Auth error: {response.status_code} on {request.method} {path}")

        return response
