# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Singleton Supabase client and data-store error type
# - cdn.py: Cloudinary image uploads
# - utils.py: Validation and normalization helpers (UUIDs, emails, slugs)
#
# supabase_client and cdn read app.config at import time, so they are
# imported explicitly (from lib.supabase_client import ...) rather than
# re-exported here; app.config itself depends on lib.utils.
# =============================================================================

from lib.utils import (
    blank_to_none,
    is_valid_email,
    is_valid_uuid,
    normalize_email,
    parse_duration,
    sanitize_input,
    sanitize_phone,
    slugify,
    sort_images,
)

__all__ = [
    "blank_to_none",
    "is_valid_email",
    "is_valid_uuid",
    "normalize_email",
    "parse_duration",
    "sanitize_input",
    "sanitize_phone",
    "slugify",
    "sort_images",
]
