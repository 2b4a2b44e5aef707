# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Input validation and normalization helpers shared by routers, services
# and scripts. Everything here is pure (no I/O) so it can be tested directly.
# =============================================================================

import math
import re
from datetime import timedelta
from typing import Any


# =============================================================================
# UUID Utilities
# =============================================================================

# Canonical 8-4-4-4-12 form. Version/variant nibbles are not checked.
_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def is_valid_uuid(value: Any) -> bool:
    """
    Check that a path parameter is a well-formed UUID string.

    Braced, URN and hyphen-less spellings are rejected even though
    uuid.UUID() would accept them; ids reach PostgREST verbatim.
    """
    return isinstance(value, str) and bool(_UUID_RE.match(value))


# =============================================================================
# Text Utilities
# =============================================================================

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_WHITESPACE_RE = re.compile(r"\s+")
_NON_SLUG_RE = re.compile(r"[^\w-]")
_NON_PHONE_RE = re.compile(r"[^\d+\-\s()]")


def is_valid_email(value: Any) -> bool:
    """Basic syntactic check: something@something.something, no whitespace."""
    return isinstance(value, str) and bool(_EMAIL_RE.match(value))


def normalize_email(value: str) -> str:
    """Lowercase and trim an email so lookups are case-insensitive."""
    return value.strip().lower()


def slugify(name: str) -> str:
    """
    Derive a URL-safe slug from a display name.

    Lowercases, turns each whitespace run into a hyphen and drops anything
    that is not a word character or hyphen. Applying it to its own output
    returns the same string.

    Example:
        slugify("Tina Jabonera 70lt")  # "tina-jabonera-70lt"
    """
    slug = _WHITESPACE_RE.sub("-", name.lower())
    return _NON_SLUG_RE.sub("", slug)


def sanitize_input(value: Any, max_length: int = 1000) -> str:
    """
    Clean free text before storage.

    Non-strings become "". Strips surrounding whitespace, removes angle
    brackets and truncates to max_length.
    """
    if not value or not isinstance(value, str):
        return ""
    cleaned = value.strip().replace("<", "").replace(">", "")
    return cleaned[:max_length]


def sanitize_phone(value: Any) -> str:
    """Sanitize, then keep only digits, spaces and + - ( )."""
    return _NON_PHONE_RE.sub("", sanitize_input(value))


def missing_fields(data: dict[str, Any], required: tuple[str, ...] | list[str]) -> list[str]:
    """Names of required keys that are absent, None or empty."""
    return [field for field in required if not data.get(field)]


def blank_fields(data: dict[str, Any], fields: tuple[str, ...] | list[str]) -> list[str]:
    """Names of keys that are present in a partial update but blank."""
    return [
        field for field in fields
        if field in data and not (isinstance(data[field], str) and data[field].strip())
    ]


def blank_to_none(data: dict[str, Any], *fields: str) -> dict[str, Any]:
    """
    Replace empty-string values with None for the given keys.

    Foreign-key columns are UUIDs; an empty string from a cleared
    <select> must be stored as NULL.
    """
    for field in fields:
        if data.get(field) == "":
            data[field] = None
    return data


# =============================================================================
# Collections
# =============================================================================

def sort_images(images: list[dict[str, Any]] | None) -> list[dict[str, Any]]:
    """Order an embedded image collection by display_order (missing sorts first)."""
    return sorted(images or [], key=lambda img: img.get("display_order") or 0)


# =============================================================================
# Durations
# =============================================================================

_DURATION_RE = re.compile(r"^(\d+)([smhd]?)$")
_DURATION_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


def parse_duration(value: str | int) -> timedelta:
    """
    Parse a compact duration such as "7d", "12h", "30m" or "3600".

    Raises:
        ValueError: If the value is not in a supported format
    """
    if isinstance(value, int):
        return timedelta(seconds=value)

    match = _DURATION_RE.match(value.strip())
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")

    amount, unit = match.groups()
    return timedelta(seconds=int(amount) * _DURATION_UNITS[unit])


def ceil_minutes(seconds: float) -> int:
    """Whole minutes, rounded up (a 30s wait reads as 1 minute)."""
    return max(0, math.ceil(seconds / 60))
