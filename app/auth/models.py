# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for admin authentication.
#
# Request fields that must produce a specific error code when missing
# (MISSING_CREDENTIALS, MISSING_FIELDS) are declared optional here and
# checked by the service, so the code reaches the client.
# =============================================================================

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AuthAdmin(BaseModel):
    """
    Authenticated administrator extracted from a session token.

    Only the id travels in the token; everything else is fetched on demand.
    """
    model_config = ConfigDict(frozen=True)

    id: str


class TokenPayload(BaseModel):
    """Decoded claims of an admin session token."""
    sub: str  # Admin ID
    iat: int  # Issued at timestamp
    exp: int  # Expiration timestamp


class AdminProfile(BaseModel):
    """Public view of an admin account. Never includes the password hash."""
    id: str
    email: str
    name: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(BaseModel):
    token: str
    admin: AdminProfile


class ProfileUpdateRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None


class PasswordChangeRequest(BaseModel):
    """Accepts the storefront's camelCase keys as well as snake_case."""
    model_config = ConfigDict(populate_by_name=True)

    current_password: Optional[str] = Field(default=None, alias="currentPassword")
    new_password: Optional[str] = Field(default=None, alias="newPassword")
    confirm_password: Optional[str] = Field(default=None, alias="confirmPassword")


class MessageResponse(BaseModel):
    success: bool = True
    message: str
