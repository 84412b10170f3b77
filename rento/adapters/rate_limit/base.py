"""Rate limiter interfaces.

Routes depend on this abstraction (not the concrete implementation) so the
process-local store can later be replaced by a shared counter service (e.g.
Redis) without touching callers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitConfig:
    """Quota for one action class.

    Attributes:
        max_requests: Requests allowed per window (>= 1).
        window_ms: Window length in milliseconds (>= 1).
        store_name: Name of the isolated counter store for this action class.
    """

    max_requests: int
    window_ms: int
    store_name: str

    def __post_init__(self) -> None:
        if self.max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        if self.window_ms < 1:
            raise ValueError("window_ms must be >= 1")
        if not self.store_name:
            raise ValueError("store_name must be a non-empty string")


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit check.

    Attributes:
        allowed: Whether the request is allowed to proceed.
        remaining: Requests left in the current window (0 when blocked).
        reset_at: UNIX epoch milliseconds when the current window reopens.
        limit: Max requests per window.
        retry_after_seconds: Suggested wait in whole seconds when blocked.
    """

    allowed: bool
    remaining: int
    reset_at: int
    limit: int
    retry_after_seconds: int | None = None


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    def check(self, caller_id: str, config: RateLimitConfig) -> RateLimitResult:
        """Count one request for ``caller_id`` against ``config``.

        Args:
            caller_id: Authenticated caller identifier.
            config: Quota and store name for the action class.

        Returns:
            RateLimitResult describing whether it was allowed.
        """
        raise NotImplementedError
