# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Admin authentication: bcrypt password hashes, per-account login lockout,
# HS256 session tokens and the bearer-token dependency guarding admin routes.
#
# Usage:
#   from app.auth import AdminDep
#
#   @router.get("/protected")
#   async def protected(admin: AdminDep):
#       return {"admin_id": admin.id}
# =============================================================================

from app.auth.dependencies import AdminDep, get_current_admin
from app.auth.models import AdminProfile, AuthAdmin

__all__ = [
    "AdminDep",
    "get_current_admin",
    "AdminProfile",
    "AuthAdmin",
]
