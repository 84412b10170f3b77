from __future__ import annotations

from rento.api.routes.applications import router as applications_router
from rento.api.routes.favorites import router as favorites_router
from rento.api.routes.health import router as health_router
from rento.api.routes.messages import router as messages_router
from rento.api.routes.tours import router as tours_router

__all__ = [
    "applications_router",
    "favorites_router",
    "health_router",
    "messages_router",
    "tours_router",
]
