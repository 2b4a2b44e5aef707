# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Gate in front of every /api/admin route except login.
#
# 1. No "Authorization: Bearer <token>" header      -> 401 UNAUTHORIZED
# 2. Token is not three dot-separated segments      -> 401 UNAUTHORIZED
#    (cheap shape check before signature verification)
# 3. Expired                                        -> 401 SESSION_EXPIRED
# 4. Any other verification failure                 -> 401 INVALID_TOKEN
#
# Token values are never logged.
#
# Usage:
#   from app.auth import AdminDep
#
#   @router.get("/protected")
#   async def protected(admin: AdminDep):
#       return {"admin_id": admin.id}
# =============================================================================

import logging
from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.auth.models import AuthAdmin
from app.auth.tokens import verify_token
from app.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor. Missing headers are reported by us, not FastAPI.
security = HTTPBearer(auto_error=False)


def _is_jwt_shaped(token: str) -> bool:
    parts = token.split(".")
    return len(parts) == 3 and all(parts)


async def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> AuthAdmin:
    """
    Extract and validate the admin from the bearer token.

    Returns:
        AuthAdmin: The authenticated admin (id only)

    Raises:
        UnauthorizedError, InvalidTokenError, SessionExpiredError
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError()

    token = credentials.credentials

    if not _is_jwt_shaped(token):
        logger.warning("[SECURITY] Malformed bearer token attempted")
        raise UnauthorizedError()

    payload = verify_token(token)

    logger.debug(f"Authenticated admin: {payload.sub}")
    return AuthAdmin(id=payload.sub)


# Type alias for dependency injection
AdminDep = Annotated[AuthAdmin, Depends(get_current_admin)]
