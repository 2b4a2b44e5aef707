# =============================================================================
# app/auth/tokens.py - Admin Session Tokens
# =============================================================================
# Issues and verifies the bearer tokens handed out at login.
#
# Tokens are HS256 JWTs signed with JWT_SECRET and carry only the admin id
# (sub), issue time and expiry. Nothing is stored server-side: a token is
# valid until it expires or the secret is rotated.
# =============================================================================

import logging
from datetime import datetime, timezone

from jose import jwt, JWTError, ExpiredSignatureError

from app.config import settings
from app.auth.models import TokenPayload
from app.exceptions import InvalidTokenError, SessionExpiredError

logger = logging.getLogger(__name__)

# The only algorithm accepted on verification
ALGORITHM = "HS256"


def issue_token(admin_id: str, now: datetime | None = None) -> str:
    """
    Mint a session token for an admin.

    Args:
        admin_id: The admin's UUID (becomes the `sub` claim)
        now: Issue time override (tests)

    Returns:
        Encoded JWT string
    """
    issued_at = now or datetime.now(timezone.utc)
    expires_at = issued_at + settings.token_lifetime

    claims = {
        "sub": str(admin_id),
        # Older storefront builds read the id from `id`
        "id": str(admin_id),
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=ALGORITHM)


def verify_token(token: str) -> TokenPayload:
    """
    Verify signature, algorithm and expiry of a session token.

    Returns:
        TokenPayload: The decoded claims

    Raises:
        SessionExpiredError: If the token is past its expiry
        InvalidTokenError: For any other failure (bad signature, wrong
            algorithm, missing claims, garbage input)
    """
    try:
        claims = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[ALGORITHM],
            options={"require_sub": True, "require_iat": True, "require_exp": True},
        )
        return TokenPayload(sub=claims["sub"], iat=claims["iat"], exp=claims["exp"])

    except ExpiredSignatureError:
        logger.info("Rejected expired session token")
        raise SessionExpiredError()

    except JWTError as e:
        logger.warning(f"[SECURITY] Invalid session token: {e}")
        raise InvalidTokenError()

    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"[SECURITY] Session token with unusable claims: {type(e).__name__}")
        raise InvalidTokenError()
