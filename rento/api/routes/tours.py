from __future__ import annotations

from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Depends, status

from rento.api.dependencies import get_tour_service
from rento.core.auth import CurrentUser, get_current_user
from rento.core.rate_limit import ActionClass, RateLimitedCaller, rate_limit
from rento.schemas.tours import (
    RequestTourRequest,
    RequestTourResponse,
    TourActionOut,
    TourActionsResponse,
    TourOut,
    UpdateTourStatusRequest,
    UpdateTourStatusResponse,
)
from rento.services.tour_service import TourService

router = APIRouter(prefix="/tours", tags=["Tours"])

ToursCaller = Annotated[RateLimitedCaller, Depends(rate_limit(ActionClass.TOURS))]
Service = Annotated[TourService, Depends(get_tour_service)]


@router.post("", response_model=RequestTourResponse, status_code=status.HTTP_201_CREATED)
async def request_tour(
    payload: RequestTourRequest,
    caller: ToursCaller,
    service: Service,
) -> RequestTourResponse:
    """Request a tour of a property at a future time.

    Raises:
        ValidationAppError: 400 if the time is in the past or the caller owns
            the property.
        NotFoundAppError: 404 if the property does not exist.
        ConflictAppError: 409 if the slot is already booked.
    """
    user = caller.consume()
    tour = await service.request_tour(
        user,
        property_id=payload.property_id,
        scheduled_at=payload.scheduled_at,
        timezone=payload.timezone,
        notes=payload.notes,
    )
    return RequestTourResponse(tour=TourOut(**asdict(tour)))


@router.get("/{tour_id}/actions", response_model=TourActionsResponse)
async def get_tour_actions(
    tour_id: str,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Service,
) -> TourActionsResponse:
    """List the status changes the caller may make on a tour right now."""
    role, tour, actions = await service.get_actions(user, tour_id)
    return TourActionsResponse(
        role=role.value,
        status=tour.status,
        actions=[TourActionOut(**action.to_dict()) for action in actions],
    )


@router.post("/update", response_model=UpdateTourStatusResponse)
async def update_tour_status(
    payload: UpdateTourStatusRequest,
    caller: ToursCaller,
    service: Service,
) -> UpdateTourStatusResponse:
    """Confirm, complete or cancel a tour.

    Landlords may take any action offered for the current status; tenants may
    only cancel.

    Raises:
        NotFoundAppError: 404 if the tour does not exist.
        PermissionAppError: 403 if the caller may not make this change.
        ValidationAppError: 400 if the transition is not offered.
    """
    user = caller.consume()
    tour = await service.update_status(
        user,
        payload.tour_id,
        status=payload.status,
        scheduled_at=payload.scheduled_at,
        timezone=payload.timezone,
        notes=payload.notes,
        cancelled_reason=payload.cancelled_reason,
    )
    return UpdateTourStatusResponse(success=True, status=tour.status)
