# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# Missing required values (SUPABASE_URL, SUPABASE_ANON_KEY, JWT_SECRET) fail
# at import time, so a misconfigured process never starts listening.
# =============================================================================

from datetime import timedelta
from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from lib.utils import parse_duration


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key"
    )

    SUPABASE_SERVICE_KEY: str | None = Field(
        default=None,
        description="Supabase service_role key (bypasses RLS). Falls back to the anon key."
    )

    # -------------------------------------------------------------------------
    # Cloudinary Configuration
    # -------------------------------------------------------------------------

    CLOUDINARY_CLOUD_NAME: str | None = Field(default=None)
    CLOUDINARY_API_KEY: str | None = Field(default=None)
    CLOUDINARY_API_SECRET: str | None = Field(default=None)

    CLOUDINARY_FOLDER: str = Field(
        default="interplast",
        description="Root folder for uploaded catalog images"
    )

    # -------------------------------------------------------------------------
    # Session Tokens
    # -------------------------------------------------------------------------

    JWT_SECRET: str = Field(
        ...,
        min_length=16,
        description="Secret key for signing admin session tokens"
    )

    JWT_EXPIRES_IN: str = Field(
        default="7d",
        pattern=r"^\d+[smhd]?$",
        description="Token lifetime: plain seconds or <n>s / <n>m / <n>h / <n>d"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        validation_alias=AliasChoices("ENVIRONMENT", "NODE_ENV"),
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging)"
    )

    HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    PORT: int = Field(
        default=3001,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # -------------------------------------------------------------------------
    # CORS
    # -------------------------------------------------------------------------

    CORS_ORIGINS: str = Field(
        default="http://localhost:5173,http://localhost:3000,https://fronted-interplast.vercel.app",
        description="Allowed CORS origins (comma-separated)"
    )

    FRONTEND_URL: str | None = Field(
        default=None,
        description="Deployed storefront origin, appended to the allow-list"
    )

    CORS_ORIGIN_REGEX: str | None = Field(
        default=r"^https://fronted-interplast.*\.vercel\.app$",
        description="Regex for preview deployment origins"
    )

    # -------------------------------------------------------------------------
    # Rate Limiting (per client IP)
    # -------------------------------------------------------------------------

    RATE_LIMIT_ENABLED: bool = Field(default=True)

    TRUST_PROXY: bool = Field(
        default=False,
        description="Key limits on the first X-Forwarded-For hop (only behind a trusted proxy)"
    )

    API_RATE_LIMIT: int = Field(default=100, ge=1)
    API_RATE_WINDOW_SECONDS: int = Field(default=15 * 60, ge=1)

    LOGIN_RATE_LIMIT: int = Field(default=5, ge=1)
    LOGIN_RATE_WINDOW_SECONDS: int = Field(default=15 * 60, ge=1)

    CONTACT_RATE_LIMIT: int = Field(default=5, ge=1)
    CONTACT_RATE_WINDOW_SECONDS: int = Field(default=60 * 60, ge=1)

    # -------------------------------------------------------------------------
    # Login Lockout (per account)
    # -------------------------------------------------------------------------

    LOGIN_MAX_ATTEMPTS: int = Field(default=5, ge=1)
    LOGIN_LOCKOUT_MINUTES: int = Field(default=15, ge=1)

    LOGIN_MIN_RESPONSE_MS: int = Field(
        default=200,
        ge=0,
        description="Floor for login response time (flattens timing differences)"
    )

    LOGIN_ATTEMPTS_BACKEND: Literal["memory", "redis"] = Field(
        default="memory",
        description="Where failed login counters live. Use redis when running several instances."
    )

    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for the shared login-attempt store"
    )

    # -------------------------------------------------------------------------
    # Image Upload Settings
    # -------------------------------------------------------------------------

    MAX_IMAGE_SIZE_MB: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum image upload size in MB"
    )

    ALLOWED_IMAGE_TYPES: str = Field(
        default="image/jpeg,image/png,image/gif,image/webp",
        description="Allowed image MIME types (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def supabase_key(self) -> str:
        """Service key when configured, anon key otherwise."""
        return self.SUPABASE_SERVICE_KEY or self.SUPABASE_ANON_KEY

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list, plus FRONTEND_URL if set.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        origins = [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]
        if self.FRONTEND_URL and self.FRONTEND_URL not in origins:
            origins.append(self.FRONTEND_URL)
        return origins

    @property
    def allowed_image_types_list(self) -> list[str]:
        return [mime.strip().lower() for mime in self.ALLOWED_IMAGE_TYPES.split(",")]

    @property
    def max_image_size_bytes(self) -> int:
        return self.MAX_IMAGE_SIZE_MB * 1024 * 1024

    @property
    def token_lifetime(self) -> timedelta:
        """JWT_EXPIRES_IN as a timedelta."""
        return parse_duration(self.JWT_EXPIRES_IN)

    @property
    def lockout_seconds(self) -> int:
        return self.LOGIN_LOCKOUT_MINUTES * 60

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
