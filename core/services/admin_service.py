# =============================================================================
# core/services/admin_service.py - Admin Account Business Logic
# =============================================================================
# Login, profile and password management for catalog administrators.
#
# Login failure paths are made indistinguishable to the caller:
# - unknown email and wrong password return the same 401 message
# - an unknown email is still checked against a dummy bcrypt hash
# - every attempt that reaches verification takes at least
#   LOGIN_MIN_RESPONSE_MS
# =============================================================================

import asyncio
import logging
import time
from typing import Any

from app.auth.login_attempts import get_login_attempt_store
from app.auth.models import LoginRequest, PasswordChangeRequest, ProfileUpdateRequest
from app.auth.passwords import DUMMY_HASH, MAX_PASSWORD_BYTES, RESET_ROUNDS, PasswordHasher
from app.auth.tokens import issue_token
from app.config import settings
from app.exceptions import (
    AccountLockedError,
    AdminNotFoundError,
    EmailInUseError,
    IncorrectPasswordError,
    InvalidCredentialsError,
    InvalidEmailFormatError,
    MissingCredentialsError,
    MissingFieldsError,
    PasswordMismatchError,
    ValidationError,
    WeakPasswordError,
)
from lib.supabase_client import SupabaseClient
from lib.utils import is_valid_email, missing_fields, normalize_email, sanitize_input

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8

# Columns safe to return to clients
PROFILE_COLUMNS = "id, email, name"


def _public_profile(row: dict[str, Any]) -> dict[str, Any]:
    return {"id": row.get("id"), "email": row.get("email"), "name": row.get("name")}


class AdminService:
    """Service for admin authentication and account management."""

    # -------------------------------------------------------------------------
    # Login
    # -------------------------------------------------------------------------

    @staticmethod
    def check_login_allowed(request: LoginRequest) -> str:
        """
        Validate credentials shape and refuse locked accounts.

        Runs before the per-IP login limit so a locked account is always
        reported as ACCOUNT_LOCKED with its remaining minutes.

        Returns:
            The normalized email

        Raises:
            MissingCredentialsError, InvalidEmailFormatError, AccountLockedError
        """
        if not request.email or not request.password:
            raise MissingCredentialsError()
        if not is_valid_email(request.email):
            raise InvalidEmailFormatError()

        email = normalize_email(request.email)
        status = get_login_attempt_store().check(email)
        if status.locked:
            logger.warning(f"[SECURITY] Login refused for locked account {email}")
            raise AccountLockedError(status.remaining_minutes)
        return email

    @staticmethod
    async def login(request: LoginRequest) -> dict[str, Any]:
        """
        Authenticate an admin by email and password.

        Returns:
            {"token": ..., "admin": {"id", "email", "name"}}

        Raises:
            MissingCredentialsError: 400 if email or password is empty
            InvalidEmailFormatError: 400 if the email is malformed
            AccountLockedError: 429 while the account is locked out
            InvalidCredentialsError: 401 for unknown email or wrong password
        """
        email = AdminService.check_login_allowed(request)
        attempts = get_login_attempt_store()

        started = time.perf_counter()

        client = SupabaseClient.get_client()
        admin = await asyncio.to_thread(
            SupabaseClient.run_single,
            client.table("admins").select("id, email, name, password").eq("email", email).single(),
            "fetch admin for login",
        )

        stored_hash = (admin or {}).get("password") or DUMMY_HASH
        # bcrypt is CPU-bound; keep it off the event loop
        password_ok = await asyncio.to_thread(PasswordHasher.verify, request.password, stored_hash)
        authenticated = admin is not None and password_ok

        floor = settings.LOGIN_MIN_RESPONSE_MS / 1000
        elapsed = time.perf_counter() - started
        if elapsed < floor:
            await asyncio.sleep(floor - elapsed)

        if not authenticated:
            count = attempts.record_failure(email)
            logger.warning(f"[SECURITY] Failed login for {email} (attempt {count})")
            raise InvalidCredentialsError()

        attempts.clear(email)
        logger.info(f"Admin {admin['id']} logged in")
        return {
            "token": issue_token(admin["id"]),
            "admin": _public_profile(admin),
        }

    # -------------------------------------------------------------------------
    # Profile
    # -------------------------------------------------------------------------

    @staticmethod
    def get_profile(admin_id: str) -> dict[str, Any]:
        """
        Raises:
            AdminNotFoundError: If the token's admin no longer exists
        """
        client = SupabaseClient.get_client()
        admin = SupabaseClient.run_single(
            client.table("admins").select(PROFILE_COLUMNS).eq("id", admin_id).single(),
            "fetch admin profile",
        )
        if not admin:
            raise AdminNotFoundError()
        return _public_profile(admin)

    @staticmethod
    def update_profile(admin_id: str, request: ProfileUpdateRequest) -> dict[str, Any]:
        """
        Change name and email. Both are required.

        Raises:
            MissingFieldsError, InvalidEmailFormatError, EmailInUseError,
            AdminNotFoundError
        """
        data = request.model_dump()
        missing = missing_fields(data, ("name", "email"))
        if missing:
            raise MissingFieldsError(missing, message="Nombre y email son requeridos")
        if not is_valid_email(data["email"]):
            raise InvalidEmailFormatError()

        email = normalize_email(data["email"])
        name = sanitize_input(data["name"], max_length=100)
        if not name:
            raise MissingFieldsError(["name"], message="Nombre y email son requeridos")

        client = SupabaseClient.get_client()
        taken = SupabaseClient.run(
            client.table("admins").select("id").eq("email", email).neq("id", admin_id).limit(1),
            "check admin email",
        )
        if taken:
            raise EmailInUseError()

        rows = SupabaseClient.run(
            client.table("admins").update({"name": name, "email": email}).eq("id", admin_id),
            "update admin profile",
            message="Error al actualizar el perfil",
        )
        if not rows:
            raise AdminNotFoundError()

        logger.info(f"Admin {admin_id} updated profile")
        return _public_profile(rows[0])

    @staticmethod
    async def change_password(admin_id: str, request: PasswordChangeRequest) -> None:
        """
        Replace the admin's password after checking the current one.

        Raises:
            MissingFieldsError: 400 if any of the three fields is empty
            PasswordMismatchError: 400 if new and confirmation differ
            WeakPasswordError: 400 if the new password is too short
            ValidationError: 400 if the new password is too long for bcrypt
            IncorrectPasswordError: 401 if the current password is wrong
            AdminNotFoundError: 404 if the admin no longer exists
        """
        data = request.model_dump()
        missing = missing_fields(data, ("current_password", "new_password", "confirm_password"))
        if missing:
            raise MissingFieldsError(missing, message="Todos los campos son requeridos")

        if request.new_password != request.confirm_password:
            raise PasswordMismatchError()
        if len(request.new_password) < MIN_PASSWORD_LENGTH:
            raise WeakPasswordError(MIN_PASSWORD_LENGTH)
        if len(request.new_password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(
                f"La contraseña no puede superar {MAX_PASSWORD_BYTES} bytes",
                code="PASSWORD_TOO_LONG",
            )

        client = SupabaseClient.get_client()
        admin = await asyncio.to_thread(
            SupabaseClient.run_single,
            client.table("admins").select("id, password").eq("id", admin_id).single(),
            "fetch admin password",
        )
        if not admin:
            raise AdminNotFoundError()

        current_ok = await asyncio.to_thread(PasswordHasher.verify, request.current_password, admin.get("password"))
        if not current_ok:
            logger.warning(f"[SECURITY] Wrong current password on change for admin {admin_id}")
            raise IncorrectPasswordError()

        new_hash = await asyncio.to_thread(PasswordHasher.hash, request.new_password, RESET_ROUNDS)
        await asyncio.to_thread(
            SupabaseClient.run,
            client.table("admins").update({"password": new_hash}).eq("id", admin_id),
            "update admin password",
            message="Error al cambiar la contraseña",
        )
        logger.info(f"Admin {admin_id} changed password")
