"""Rate limiter interfaces.

The HTTP layer depends on these abstractions (not the concrete store or
algorithm) so the in-memory store can later be replaced by a shared one
(e.g. Redis) for multi-instance deployments.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitOptions:
    """Per-call limiter configuration.

    Attributes:
        limit: Max admissions per window.
        window_ms: Window size in milliseconds.
        key: Logical scope discriminator. When None the caller's scope
            (typically the request path) is used.

    Raises:
        ValueError: If limit or window_ms are not positive.
    """

    limit: int
    window_ms: int
    key: str | None = None

    def __post_init__(self) -> None:
        if self.limit < 1:
            raise ValueError("limit must be >= 1")
        if self.window_ms < 1:
            raise ValueError("window_ms must be >= 1")


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a check-and-record call.

    Attributes:
        ok: Whether the request is admitted.
        remaining: Admissions left in the current window (0 when denied).
        retry_after: Seconds until the oldest recorded hit expires; only set
            when denied, always >= 1.
    """

    ok: bool
    remaining: int
    retry_after: int | None = None


class HitStore(ABC):
    """Mapping from bucket key to the admitted-hit timestamps (ms)."""

    @abstractmethod
    def get(self, key: str) -> list[int]:
        """Return the recorded timestamps for ``key`` (empty when unseen)."""
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, hits: list[int]) -> None:
        raise NotImplementedError

    @abstractmethod
    def __len__(self) -> int:
        """Number of tracked bucket keys."""
        raise NotImplementedError


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    def check_and_record(
        self,
        identity: str,
        options: RateLimitOptions,
        *,
        scope: str = "",
    ) -> RateLimitResult:
        """Admit or deny one request for ``identity`` and record it if admitted.

        Args:
            identity: Caller identity (e.g. client IP).
            options: Limit, window and optional logical key.
            scope: Fallback scope when ``options.key`` is None.

        Returns:
            RateLimitResult describing the decision and remaining quota.
        """
        raise NotImplementedError
