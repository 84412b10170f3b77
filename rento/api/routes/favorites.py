from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from rento.api.dependencies import get_favorite_service
from rento.core.auth import CurrentUser, get_current_user
from rento.core.rate_limit import ActionClass, RateLimitedCaller, rate_limit
from rento.schemas.engagement import FavoriteRequest, FavoriteResponse, FavoritesListResponse
from rento.services.favorite_service import FavoriteService

router = APIRouter(prefix="/favorites", tags=["Favorites"])

FavoritesCaller = Annotated[RateLimitedCaller, Depends(rate_limit(ActionClass.FAVORITES))]
Service = Annotated[FavoriteService, Depends(get_favorite_service)]


@router.post("", response_model=FavoriteResponse, status_code=status.HTTP_201_CREATED)
async def add_favorite(
    payload: FavoriteRequest,
    response: Response,
    caller: FavoritesCaller,
    service: Service,
) -> FavoriteResponse:
    """Save a property; saving it again is a no-op answered with 200."""
    user = caller.consume()
    created = await service.add_favorite(user, payload.property_id)
    if not created:
        response.status_code = status.HTTP_200_OK
    return FavoriteResponse(ok=True)


@router.delete("", response_model=FavoriteResponse)
async def remove_favorite(
    payload: FavoriteRequest,
    caller: FavoritesCaller,
    service: Service,
) -> FavoriteResponse:
    user = caller.consume()
    await service.remove_favorite(user, payload.property_id)
    return FavoriteResponse(ok=True)


@router.get("", response_model=FavoritesListResponse)
async def list_favorites(
    user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Service,
) -> FavoritesListResponse:
    return FavoritesListResponse(property_ids=await service.list_favorites(user))
