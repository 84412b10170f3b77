"""Saved-property (favorites) service."""

from __future__ import annotations

import logging

from rento.adapters.store.base import AbstractRentoStore
from rento.core.auth import CurrentUser
from rento.core.errors import NotFoundAppError

logger = logging.getLogger(__name__)


class FavoriteService:
    def __init__(self, store: AbstractRentoStore) -> None:
        self._store = store

    async def add_favorite(self, user: CurrentUser, property_id: str) -> bool:
        """Save a property. Returns True when newly saved, False if it already was.

        Raises:
            NotFoundAppError: If the property does not exist.
        """
        prop = await self._store.get_property(property_id)
        if prop is None:
            raise NotFoundAppError(
                code="property_not_found",
                message="Property not found",
                details={"resource": "property", "resource_id": property_id},
            )

        created = await self._store.add_favorite(user.id, prop.id)
        logger.info("favorite.added", extra={"property_id": prop.id, "created": created})
        return created

    async def remove_favorite(self, user: CurrentUser, property_id: str) -> None:
        removed = await self._store.remove_favorite(user.id, property_id)
        logger.info("favorite.removed", extra={"property_id": property_id, "removed": removed})

    async def list_favorites(self, user: CurrentUser) -> list[str]:
        return await self._store.list_favorites(user.id)
