# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Replaces the Supabase client with an in-memory fake for every test
# - Resets rate limiters and login lockout state between tests
# =============================================================================

import os
from types import SimpleNamespace
from typing import Any

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-0123456789abcdef")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("LOGIN_MIN_RESPONSE_MS", "0")
os.environ.setdefault("LOGIN_ATTEMPTS_BACKEND", "memory")

import pytest
from fastapi.testclient import TestClient

from app.auth.login_attempts import get_login_attempt_store
from app.auth.tokens import issue_token
from app.rate_limit import RateLimit
from lib.supabase_client import SupabaseClient


ADMIN_ID = "3f2b8c1e-5d4a-4e6f-9a7b-1c2d3e4f5a6b"
PRODUCT_ID = "0b7e6c2a-4f1d-4c8e-a9b3-5d6e7f8a9b0c"
CATEGORY_ID = "7e49301d-97d6-4a98-b7b0-5c8d2f4bfa56"
NIL_UUID = "00000000-0000-0000-0000-000000000000"


# =============================================================================
# Fake Clock
# =============================================================================

class FakeClock:
    """Monotonic clock the test moves by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# =============================================================================
# Fake Supabase Client
# =============================================================================

class FakeQuery:
    """
    Stand-in for a postgrest request builder.

    Every builder method (select, eq, order, insert, ...) is recorded and
    returns the same query, so chains of any length work. execute() pops
    the next queued response for the table.
    """

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.calls: list[tuple[str, tuple, dict]] = []

    def __getattr__(self, name: str):
        def method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self
        return method

    def called(self, name: str) -> list[tuple[tuple, dict]]:
        return [(args, kwargs) for n, args, kwargs in self.calls if n == name]

    def execute(self):
        queued = self.db.responses.get(self.table)
        outcome = queued.pop(0) if queued else SimpleNamespace(data=[], count=0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeSupabase:
    """Records table queries and answers them from per-table queues."""

    def __init__(self):
        self.queries: list[FakeQuery] = []
        self.responses: dict[str, list[Any]] = {}

    def table(self, name: str) -> FakeQuery:
        query = FakeQuery(self, name)
        self.queries.append(query)
        return query

    def respond(self, table: str, data: Any = None, count: int | None = None) -> "FakeSupabase":
        self.responses.setdefault(table, []).append(SimpleNamespace(data=data, count=count))
        return self

    def fail(self, table: str, error: Exception) -> "FakeSupabase":
        self.responses.setdefault(table, []).append(error)
        return self

    def queries_for(self, table: str) -> list[FakeQuery]:
        return [q for q in self.queries if q.table == table]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def fake_db(monkeypatch):
    """Every test talks to a fresh fake instead of a real Supabase project."""
    fake = FakeSupabase()
    monkeypatch.setattr(SupabaseClient, "get_client", classmethod(lambda cls: fake))
    return fake


@pytest.fixture(autouse=True)
def reset_limits():
    """Start each test with empty rate-limit windows and lockout counters."""
    RateLimit.reset_all()
    get_login_attempt_store.cache_clear()
    yield
    RateLimit.reset_all()
    get_login_attempt_store.cache_clear()


@pytest.fixture
def client():
    from app.main import app

    return TestClient(app)


@pytest.fixture
def auth_headers():
    """Bearer header for a valid admin session."""
    return {"Authorization": f"Bearer {issue_token(ADMIN_ID)}"}


@pytest.fixture
def sample_product():
    return {
        "id": PRODUCT_ID,
        "code": "SUD-0005",
        "name": "Tina ovalada con jabonera de 35",
        "slug": "tina-ovalada-con-jabonera-de-35",
        "category_id": CATEGORY_ID,
        "brand_id": None,
        "status": "available",
        "is_featured": False,
        "is_new": True,
        "category": {"id": CATEGORY_ID, "name": "Tinas", "slug": "tinas", "icon": "Bath", "color": "#0ea5e9"},
        "brand": None,
        "images": [
            {"id": "img-2", "url": "https://res.cloudinary.com/x/2.webp", "display_order": 2},
            {"id": "img-0", "url": "https://res.cloudinary.com/x/0.webp", "display_order": 0},
            {"id": "img-1", "url": "https://res.cloudinary.com/x/1.webp", "display_order": 1},
        ],
    }
