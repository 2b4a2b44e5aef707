# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Admin login plus profile and password management. Mounted at /api/admin.
#
# Login is limited twice: per account (the lockout in login_attempts) and per
# IP (login_rate_limit, successful logins are not counted). The account
# lockout is checked first so a locked account always gets ACCOUNT_LOCKED.
#
# Profile handlers are plain functions: supabase-py is synchronous, so
# FastAPI runs them in its threadpool instead of on the event loop.
# =============================================================================

import logging

from fastapi import APIRouter, Request

from app.auth.dependencies import AdminDep
from app.auth.models import (
    AdminProfile,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    PasswordChangeRequest,
    ProfileUpdateRequest,
)
from app.rate_limit import login_rate_limit
from core.services.admin_service import AdminService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, http_request: Request) -> LoginResponse:
    """
    Exchange admin credentials for a session token.

    Raises:
        400: Missing credentials or malformed email
        401: Wrong email or password (same message for both)
        429: Account locked out, or too many attempts from this IP
    """
    AdminService.check_login_allowed(request)
    await login_rate_limit(http_request)
    result = await AdminService.login(request)
    login_rate_limit.forgive(http_request)
    return LoginResponse(**result)


@router.get("/profile", response_model=AdminProfile)
def get_profile(admin: AdminDep) -> AdminProfile:
    """Get the authenticated admin's profile."""
    return AdminProfile(**AdminService.get_profile(admin.id))


@router.put("/profile", response_model=AdminProfile)
def update_profile(request: ProfileUpdateRequest, admin: AdminDep) -> AdminProfile:
    """Change the authenticated admin's name and email."""
    return AdminProfile(**AdminService.update_profile(admin.id, request))


@router.put("/password", response_model=MessageResponse)
async def change_password(request: PasswordChangeRequest, admin: AdminDep) -> MessageResponse:
    """
    Change the authenticated admin's password.

    Body: {"currentPassword", "newPassword", "confirmPassword"}
    """
    await AdminService.change_password(admin.id, request)
    return MessageResponse(message="Contraseña actualizada correctamente")
