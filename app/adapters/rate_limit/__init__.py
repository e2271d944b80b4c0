"""Rate limiting adapters.

The API layer talks to ``AbstractRateLimiter``; the in-memory sliding-window
implementation can later be backed by a shared store without touching routes.
"""

from app.adapters.rate_limit.base import (
    AbstractRateLimiter,
    HitStore,
    RateLimitOptions,
    RateLimitResult,
)
from app.adapters.rate_limit.in_memory import InMemoryHitStore, SlidingWindowRateLimiter

__all__ = [
    "AbstractRateLimiter",
    "HitStore",
    "InMemoryHitStore",
    "RateLimitOptions",
    "RateLimitResult",
    "SlidingWindowRateLimiter",
]
