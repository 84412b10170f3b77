"""Application factory for the Rento API.

Builds the app (metadata, middleware, handlers, routers) and owns the
per-app collaborators kept on ``app.state``:

- ``store``: data store used by every service
- ``rate_limiter`` / ``rate_limit_configs``: fixed-window counters and quotas
- ``clock``: aware-UTC ``now`` used for timestamps and tour date checks
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from fastapi import FastAPI

from rento.adapters.rate_limit import AbstractRateLimiter, InMemoryRateLimiter
from rento.adapters.store import AbstractRentoStore, InMemoryRentoStore
from rento.api.routes import (
    applications_router,
    favorites_router,
    health_router,
    messages_router,
    tours_router,
)
from rento.core.config import settings
from rento.core.exception_handlers import setup_exception_handlers
from rento.core.logging import configure_logging
from rento.core.middleware import request_id_middleware
from rento.core.openapi import apply_openapi_customizations
from rento.core.rate_limit import build_rate_limit_configs
from rento.utils.clock import utc_now

logger = logging.getLogger(__name__)


def create_app(
    store: AbstractRentoStore | None = None,
    rate_limiter: AbstractRateLimiter | None = None,
    clock: Callable[[], datetime] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        store: Data store; defaults to a fresh ``InMemoryRentoStore``.
        rate_limiter: Limiter; defaults to a fresh ``InMemoryRateLimiter``.
        clock: Source of the current time; defaults to ``utc_now``.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Rento API",
        description=(
            "Rental marketplace API: tenants apply for properties and request "
            "tours, landlords review applications and manage tours, and both "
            "sides message each other. Write endpoints are rate limited per "
            "caller. Requires X-API-Key."
        ),
        version="0.1.0",
        debug=settings.app.debug,
    )

    app.state.store = store if store is not None else InMemoryRentoStore()
    app.state.rate_limiter = (
        rate_limiter
        if rate_limiter is not None
        else InMemoryRateLimiter(cleanup_probability=settings.app.rate_limit_cleanup_probability)
    )
    app.state.rate_limit_configs = build_rate_limit_configs(settings.rate_limit)
    app.state.clock = clock or utc_now

    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    for router in (applications_router, tours_router, messages_router, favorites_router):
        app.include_router(router, prefix="/api")
    app.include_router(health_router)

    apply_openapi_customizations(app)

    logger.info(
        "app.created",
        extra={
            "store": type(app.state.store).__name__,
            "rate_limit_enabled": settings.app.rate_limit_enabled,
            "api_key_required": settings.app.api_key_required,
        },
    )
    return app
