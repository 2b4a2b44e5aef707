# =============================================================================
# app/auth/passwords.py - Password Hashing
# =============================================================================
# bcrypt hashing for admin credentials at rest.
#
# - Cost 10 for routine writes (seeding a single admin)
# - Cost 12 for credential resets and password changes
#
# verify() never raises: a malformed or empty stored hash just fails.
# =============================================================================

import logging

import bcrypt

logger = logging.getLogger(__name__)

DEFAULT_ROUNDS = 10
RESET_ROUNDS = 12

# bcrypt only looks at the first 72 bytes of input
MAX_PASSWORD_BYTES = 72

# Valid cost-10 bcrypt hash that matches no real password. Verified against
# when the email is unknown so both login failure paths cost the same.
DUMMY_HASH = "$2a$10$N9qo8uLOickgx2ZMRZoMyeIjZAgcfl7p92ldGxad68LJZdL17lhWy"


class PasswordHasher:
    """Salted, adaptive password hashes (bcrypt)."""

    @staticmethod
    def hash(plaintext: str, rounds: int = DEFAULT_ROUNDS) -> str:
        """
        Hash a password with a fresh random salt.

        Raises:
            ValueError: If the password is longer than bcrypt accepts
        """
        encoded = plaintext.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password exceeds {MAX_PASSWORD_BYTES} bytes")
        return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds)).decode("utf-8")

    @staticmethod
    def verify(plaintext: str, hashed: str | None) -> bool:
        """Check a password against a stored hash. Returns False on any malformed input."""
        if not plaintext or not hashed:
            return False
        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), hashed.encode("utf-8"))
        except (ValueError, TypeError) as e:
            logger.warning(f"Password verification failed on malformed input: {type(e).__name__}")
            return False
