"""Service providers for route handlers.

Services are cheap wrappers around the store and clock the app factory put on
``app.state``, so they are built per request.
"""

from __future__ import annotations

from fastapi import Request

from rento.adapters.store.base import AbstractRentoStore
from rento.services.application_service import ApplicationService
from rento.services.favorite_service import FavoriteService
from rento.services.message_service import MessageService
from rento.services.tour_service import TourService


def get_store(request: Request) -> AbstractRentoStore:
    return request.app.state.store


def get_application_service(request: Request) -> ApplicationService:
    return ApplicationService(get_store(request), now=request.app.state.clock)


def get_tour_service(request: Request) -> TourService:
    return TourService(get_store(request), now=request.app.state.clock)


def get_message_service(request: Request) -> MessageService:
    return MessageService(get_store(request), now=request.app.state.clock)


def get_favorite_service(request: Request) -> FavoriteService:
    return FavoriteService(get_store(request))
