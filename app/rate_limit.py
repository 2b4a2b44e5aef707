# =============================================================================
# app/rate_limit.py - Per-IP Rate Limiting
# =============================================================================
# Sliding-window limiter keyed by client IP, used two ways:
# - api_rate_limit_middleware: blanket limit on every /api/* request
# - RateLimit(...) dependencies: stricter limits on login and contact
#
# State is process-local, like the login lockout's in-memory backend.
# =============================================================================

import logging
import time
from collections import defaultdict, deque
from threading import Lock
from typing import Callable

from fastapi import Request
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import RateLimitedError

logger = logging.getLogger(__name__)


class InMemoryRateLimiter:
    """Allow at most `limit` hits per key within any `window_seconds` span."""

    def __init__(self, limit: int, window_seconds: float, clock: Callable[[], float] = time.monotonic):
        self._limit = max(1, int(limit))
        self._window = max(0.1, float(window_seconds))
        self._clock = clock
        self._hits: dict[str, deque[float]] = defaultdict(deque)
        self._lock = Lock()

    def hit(self, key: str) -> tuple[bool, int]:
        """
        Register a hit for key.

        Returns:
            (allowed, retry_after_seconds). Rejected hits are not recorded.
        """
        with self._lock:
            now = self._clock()
            hits = self._hits[key]
            while hits and now - hits[0] >= self._window:
                hits.popleft()
            if len(hits) >= self._limit:
                retry_after = int(self._window - (now - hits[0])) + 1
                return False, retry_after
            hits.append(now)
            return True, 0

    def forgive(self, key: str) -> None:
        """Drop the most recent hit for key (successful logins don't count)."""
        with self._lock:
            hits = self._hits.get(key)
            if hits:
                hits.pop()

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


def client_ip(request: Request) -> str:
    """
    Client address used as the rate-limit key.

    X-Forwarded-For is only honored behind a trusted proxy; otherwise any
    client could pick its own key.
    """
    if settings.TRUST_PROXY:
        forwarded = request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
        if forwarded:
            return forwarded
    return request.client.host if request.client else "unknown"


class RateLimit:
    """
    FastAPI dependency enforcing a per-IP limit on one route. It can also be
    awaited directly from a handler, as login does after its lockout check.

    Usage:
        contact_rate_limit = RateLimit(5, 60 * 60, "Demasiados mensajes enviados.")

        @router.post("/contact", dependencies=[Depends(contact_rate_limit)])
    """

    instances: list["RateLimit"] = []

    def __init__(self, limit: int, window_seconds: int, message: str):
        self.limiter = InMemoryRateLimiter(limit, window_seconds)
        self.message = message
        RateLimit.instances.append(self)

    async def __call__(self, request: Request) -> None:
        if not settings.RATE_LIMIT_ENABLED:
            return
        ip = client_ip(request)
        allowed, retry_after = self.limiter.hit(ip)
        if not allowed:
            logger.warning(f"Rate limit exceeded on {request.url.path} for {ip}")
            raise RateLimitedError(self.message, retry_after=retry_after)

    def forgive(self, request: Request) -> None:
        self.limiter.forgive(client_ip(request))

    @classmethod
    def reset_all(cls) -> None:
        for instance in cls.instances:
            instance.limiter.reset()
        api_limiter.reset()


# =============================================================================
# Limiters
# =============================================================================

api_limiter = InMemoryRateLimiter(settings.API_RATE_LIMIT, settings.API_RATE_WINDOW_SECONDS)

login_rate_limit = RateLimit(
    settings.LOGIN_RATE_LIMIT,
    settings.LOGIN_RATE_WINDOW_SECONDS,
    "Demasiados intentos de login. Espera 15 minutos.",
)

contact_rate_limit = RateLimit(
    settings.CONTACT_RATE_LIMIT,
    settings.CONTACT_RATE_WINDOW_SECONDS,
    "Demasiados mensajes enviados. Intenta más tarde.",
)


async def api_rate_limit_middleware(request: Request, call_next):
    """Blanket limit on /api/* (middleware: must answer directly, not raise)."""
    if settings.RATE_LIMIT_ENABLED and request.url.path.startswith("/api/"):
        allowed, retry_after = api_limiter.hit(client_ip(request))
        if not allowed:
            error = RateLimitedError(retry_after=retry_after)
            return JSONResponse(status_code=error.status_code, content=error.to_dict(), headers=error.headers)
    return await call_next(request)
