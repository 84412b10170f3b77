"""Rate limiting dependency for FastAPI routes.

Wires the rate limiting adapter into the HTTP layer:
- one quota per action class (messages, applications, tours, favorites)
- keyed by the authenticated caller, so authentication runs first
- counted from the route body, after the payload has validated
- the limiter instance lives on ``app.state`` and is created by the app
  factory, so every app (and every test) owns its own counters
- disabled unless ``APP_RATE_LIMIT_ENABLED`` is true (the default)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Awaitable, Callable

from fastapi import Depends, HTTPException, Request, Response, status

from rento.adapters.rate_limit.base import AbstractRateLimiter, RateLimitConfig, RateLimitResult
from rento.core.auth import CurrentUser, get_current_user
from rento.core.config import RateLimitSettings, settings
from rento.core.logging import hash_identifier

logger = logging.getLogger(__name__)


class ActionClass(str, Enum):
    """Named categories of rate-limited writes, each with its own quota."""

    MESSAGES = "messages"
    APPLICATIONS = "applications"
    TOURS = "tours"
    FAVORITES = "favorites"


def build_rate_limit_configs(
    rate_limit_settings: RateLimitSettings | None = None,
) -> dict[ActionClass, RateLimitConfig]:
    """Build the per-action quotas from settings.

    Args:
        rate_limit_settings: Source settings; defaults to ``settings.rate_limit``.

    Returns:
        Mapping of action class to its RateLimitConfig.
    """
    cfg = rate_limit_settings or settings.rate_limit
    return {
        action: RateLimitConfig(
            max_requests=getattr(cfg, f"{action.value}_max_requests"),
            window_ms=getattr(cfg, f"{action.value}_window_ms"),
            store_name=action.value,
        )
        for action in ActionClass
    }


def get_rate_limiter(request: Request) -> AbstractRateLimiter:
    """Return the limiter owned by the running app."""
    return request.app.state.rate_limiter


def _rate_limit_headers(result: RateLimitResult) -> dict[str, str]:
    headers = {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": str(result.reset_at),
    }
    if result.retry_after_seconds is not None:
        headers["Retry-After"] = str(result.retry_after_seconds)
    return headers


@dataclass
class RateLimitedCaller:
    """Authenticated caller of a rate-limited route.

    Resolving the dependency does not count anything. Routes call
    ``consume()`` first thing in their body, which FastAPI only runs once the
    request payload has validated, so rejected payloads never spend quota.
    """

    user: CurrentUser
    action: ActionClass
    request: Request
    response: Response

    def consume(self) -> CurrentUser:
        """Spend one unit of the caller's quota and return the caller.

        Raises:
            HTTPException: 429 Too Many Requests when the quota is exhausted.
        """
        if not settings.app.rate_limit_enabled:
            return self.user

        config = self.request.app.state.rate_limit_configs[self.action]
        result = get_rate_limiter(self.request).check(self.user.id, config)
        log_fields = {
            "action_class": self.action.value,
            "user_hash": hash_identifier(self.user.id),
            "limit": result.limit,
            "remaining": result.remaining,
            "window_ms": config.window_ms,
        }

        if result.allowed:
            logger.info("rate_limit.allowed", extra=log_fields)
            if settings.app.rate_limit_include_headers:
                self.response.headers.update(_rate_limit_headers(result))
            return self.user

        logger.warning(
            "rate_limit.exceeded",
            extra={**log_fields, "retry_after_s": result.retry_after_seconds},
        )
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests. Please try again later.",
            headers=_rate_limit_headers(result) if settings.app.rate_limit_include_headers else None,
        )


def rate_limit(action: ActionClass) -> Callable[..., Awaitable[RateLimitedCaller]]:
    """Create a dependency that authenticates and prepares the quota of ``action``.

    Usage:
        @router.post("/thing")
        async def endpoint(payload: Thing, caller: Annotated[RateLimitedCaller, Depends(rate_limit(ActionClass.MESSAGES))]):
            user = caller.consume()
    """

    async def rate_limited_caller(
        request: Request,
        response: Response,
        user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> RateLimitedCaller:
        return RateLimitedCaller(user=user, action=action, request=request, response=response)

    rate_limited_caller.__name__ = f"{action.value}_rate_limited_caller"
    return rate_limited_caller
