# =============================================================================
# app/auth/login_attempts.py - Per-Account Login Lockout
# =============================================================================
# Counts failed logins per normalized email and locks the account once the
# count reaches LOGIN_MAX_ATTEMPTS. The lock lasts LOGIN_LOCKOUT_MINUTES
# from the most recent failure.
#
#   Clear --fail--> Counting(n) --n >= max--> Locked --window elapses--> Clear
#   any state --successful login--> Clear
#
# Two backends:
# - InMemoryLoginAttemptStore: process-local. Each instance of the API keeps
#   its own counters, so N instances allow N * max attempts.
# - RedisLoginAttemptStore: counters shared by every instance (INCR + EXPIRE).
# =============================================================================

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from threading import Lock
from typing import Any, Callable

from app.config import settings
from app.exceptions import UpstreamError
from lib.utils import ceil_minutes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LockStatus:
    """Result of a lockout check."""
    locked: bool
    remaining_minutes: int = 0


UNLOCKED = LockStatus(locked=False)


class LoginAttemptStore(ABC):
    """Interface shared by the lockout backends."""

    def __init__(self, max_attempts: int, lockout_seconds: int):
        self.max_attempts = max_attempts
        self.lockout_seconds = lockout_seconds

    @abstractmethod
    def check(self, email: str) -> LockStatus:
        """Report whether the account is locked (purging expired state)."""

    @abstractmethod
    def record_failure(self, email: str) -> int:
        """Count a failed attempt. Returns the failure count after increment."""

    @abstractmethod
    def clear(self, email: str) -> None:
        """Forget all failures for the account."""

    def _log_failure(self, email: str, count: int) -> None:
        if count >= self.max_attempts:
            logger.warning(
                f"login_attempts: ACCOUNT LOCKED email={email} "
                f"failed_attempts={count} lockout={self.lockout_seconds}s"
            )


# =============================================================================
# In-Memory Backend
# =============================================================================

@dataclass
class AttemptRecord:
    count: int
    last_attempt: float


class InMemoryLoginAttemptStore(LoginAttemptStore):
    """Process-local counters. Lost on restart."""

    def __init__(
        self,
        max_attempts: int = 5,
        lockout_seconds: int = 15 * 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(max_attempts, lockout_seconds)
        self._clock = clock
        self._records: dict[str, AttemptRecord] = {}
        self._lock = Lock()

    def _live_record(self, email: str, now: float) -> AttemptRecord | None:
        record = self._records.get(email)
        if record is None:
            return None
        if now - record.last_attempt > self.lockout_seconds:
            del self._records[email]
            logger.info(f"login_attempts: window expired for email={email}")
            return None
        return record

    def check(self, email: str) -> LockStatus:
        with self._lock:
            now = self._clock()
            record = self._live_record(email, now)
            if record is None or record.count < self.max_attempts:
                return UNLOCKED
            remaining = self.lockout_seconds - (now - record.last_attempt)
            return LockStatus(locked=True, remaining_minutes=ceil_minutes(remaining))

    def record_failure(self, email: str) -> int:
        with self._lock:
            now = self._clock()
            record = self._live_record(email, now)
            if record is None:
                record = AttemptRecord(count=0, last_attempt=now)
                self._records[email] = record
            record.count += 1
            record.last_attempt = now
            count = record.count
        self._log_failure(email, count)
        return count

    def clear(self, email: str) -> None:
        with self._lock:
            self._records.pop(email, None)

    def __len__(self) -> int:
        return len(self._records)


# =============================================================================
# Redis Backend
# =============================================================================

class RedisLoginAttemptStore(LoginAttemptStore):
    """
    Counters in Redis, one key per email with a TTL equal to the lockout.

    Each failure refreshes the TTL, so the lock runs from the most recent
    failure; when the key expires the account is clear again.
    """

    KEY_PREFIX = "interplast:login_attempts:"

    def __init__(self, client: Any, max_attempts: int = 5, lockout_seconds: int = 15 * 60):
        super().__init__(max_attempts, lockout_seconds)
        self._client = client

    def _key(self, email: str) -> str:
        return f"{self.KEY_PREFIX}{email}"

    def check(self, email: str) -> LockStatus:
        import redis

        key = self._key(email)
        try:
            count = self._client.get(key)
            if count is None or int(count) < self.max_attempts:
                return UNLOCKED
            ttl = self._client.ttl(key)
        except redis.RedisError as e:
            raise UpstreamError(cause=f"redis login_attempts check: {e}")

        # -2: key vanished between calls, -1: no expiry (never set by us)
        if ttl is None or ttl < 0:
            return UNLOCKED
        return LockStatus(locked=True, remaining_minutes=ceil_minutes(ttl))

    def record_failure(self, email: str) -> int:
        import redis

        key = self._key(email)
        try:
            pipe = self._client.pipeline()
            pipe.incr(key)
            pipe.expire(key, self.lockout_seconds)
            count, _ = pipe.execute()
        except redis.RedisError as e:
            raise UpstreamError(cause=f"redis login_attempts record: {e}")

        count = int(count)
        self._log_failure(email, count)
        return count

    def clear(self, email: str) -> None:
        import redis

        try:
            self._client.delete(self._key(email))
        except redis.RedisError as e:
            raise UpstreamError(cause=f"redis login_attempts clear: {e}")


# =============================================================================
# Factory
# =============================================================================

@lru_cache
def get_login_attempt_store() -> LoginAttemptStore:
    """
    Build the configured store once per process.

    Call get_login_attempt_store.cache_clear() to start from empty state.
    """
    if settings.LOGIN_ATTEMPTS_BACKEND == "redis":
        import redis

        logger.info("Using Redis login-attempt store")
        return RedisLoginAttemptStore(
            redis.from_url(settings.REDIS_URL, decode_responses=True),
            max_attempts=settings.LOGIN_MAX_ATTEMPTS,
            lockout_seconds=settings.lockout_seconds,
        )

    return InMemoryLoginAttemptStore(
        max_attempts=settings.LOGIN_MAX_ATTEMPTS,
        lockout_seconds=settings.lockout_seconds,
    )
