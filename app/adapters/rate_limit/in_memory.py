"""In-memory sliding-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: sync FastAPI dependencies run in a threadpool, so the
  retrieve-filter-append sequence is serialized by a lock.
- Stale timestamps are pruned lazily when a key is accessed. Keys themselves
  are never evicted, so the store grows with the number of distinct callers.
"""

from __future__ import annotations

import math
import threading
import time
from typing import Callable

from app.adapters.rate_limit.base import (
    AbstractRateLimiter,
    HitStore,
    RateLimitOptions,
    RateLimitResult,
)


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class InMemoryHitStore(HitStore):
    """Dict-backed hit store, owned by the application instance that creates it."""

    def __init__(self) -> None:
        self._hits: dict[str, list[int]] = {}

    def get(self, key: str) -> list[int]:
        return list(self._hits.get(key, ()))

    def set(self, key: str, hits: list[int]) -> None:
        self._hits[key] = hits

    def __len__(self) -> int:
        return len(self._hits)


class SlidingWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter counting admissions within the trailing ``window_ms``.

    Every admitted request is stored as a millisecond timestamp under
    ``"{identity}:{scope}"``. A request is admitted while fewer than
    ``limit`` timestamps are younger than the window; denials are not
    recorded, so hammering a throttled key does not extend the lockout.
    """

    def __init__(
        self,
        *,
        store: HitStore | None = None,
        clock_ms: Callable[[], int] = _now_ms,
    ) -> None:
        """Initialize the limiter.

        Args:
            store: Hit store to read and write; a fresh in-memory store by default.
            clock_ms: Time source returning UNIX time in milliseconds.
        """
        self._store = store if store is not None else InMemoryHitStore()
        self._clock_ms = clock_ms
        self._lock = threading.Lock()

    @property
    def store(self) -> HitStore:
        return self._store

    @staticmethod
    def bucket_key(identity: str, options: RateLimitOptions, scope: str = "") -> str:
        return f"{identity}:{options.key if options.key is not None else scope}"

    def check_and_record(
        self,
        identity: str,
        options: RateLimitOptions,
        *,
        scope: str = "",
    ) -> RateLimitResult:
        key = self.bucket_key(identity, options, scope)

        with self._lock:
            now = self._clock_ms()
            hits = [ts for ts in self._store.get(key) if now - ts < options.window_ms]

            if len(hits) < options.limit:
                hits.append(now)
                self._store.set(key, hits)
                return RateLimitResult(ok=True, remaining=max(0, options.limit - len(hits)))

            # Write back the pruned sequence; the denied attempt itself is not recorded.
            self._store.set(key, hits)
            oldest = hits[0]
            retry_after = max(1, math.ceil((options.window_ms - (now - oldest)) / 1000))
            return RateLimitResult(ok=False, remaining=0, retry_after=retry_after)
