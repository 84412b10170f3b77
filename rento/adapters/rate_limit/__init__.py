"""Rate limiting adapters.

The service starts with a process-local, in-memory limiter; a shared store can
be introduced behind ``AbstractRateLimiter`` without changing the API layer.
"""

from rento.adapters.rate_limit.base import AbstractRateLimiter, RateLimitConfig, RateLimitResult
from rento.adapters.rate_limit.in_memory import InMemoryRateLimiter

__all__ = ["AbstractRateLimiter", "InMemoryRateLimiter", "RateLimitConfig", "RateLimitResult"]
