from __future__ import annotations

from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Depends, status

from rento.api.dependencies import get_application_service
from rento.core.auth import CurrentUser, get_current_user
from rento.core.rate_limit import ActionClass, RateLimitedCaller, rate_limit
from rento.schemas.applications import (
    ApplicationOut,
    CreateApplicationRequest,
    CreateApplicationResponse,
    CreatedApplication,
    UpdateApplicationStatusRequest,
    UpdateApplicationStatusResponse,
)
from rento.services.application_service import ApplicationService
from rento.services.application_status import normalize_application_status

router = APIRouter(prefix="/applications", tags=["Applications"])

ApplicationsCaller = Annotated[RateLimitedCaller, Depends(rate_limit(ActionClass.APPLICATIONS))]
Service = Annotated[ApplicationService, Depends(get_application_service)]


@router.post(
    "",
    response_model=CreateApplicationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_application(
    payload: CreateApplicationRequest,
    caller: ApplicationsCaller,
    service: Service,
) -> CreateApplicationResponse:
    """Submit a rental application for a property.

    The new application starts in ``submitted`` with an empty timeline.

    Raises:
        NotFoundAppError: 404 if the property does not exist.
    """
    user = caller.consume()
    record = await service.submit_application(
        user,
        property_id=payload.property_id,
        monthly_income=payload.monthly_income,
        message=payload.message,
    )
    return CreateApplicationResponse(application=CreatedApplication(id=record.id))


@router.get("/{application_id}", response_model=ApplicationOut)
async def get_application(
    application_id: str,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Service,
) -> ApplicationOut:
    record = await service.get_application(user, application_id)
    data = asdict(record)
    data["status"] = normalize_application_status(record.status).value
    if not isinstance(record.timeline, list):
        data["timeline"] = []
    return ApplicationOut(**data, allowed_transitions=service.allowed_transitions(record))


@router.patch("/{application_id}/status", response_model=UpdateApplicationStatusResponse)
async def update_application_status(
    application_id: str,
    payload: UpdateApplicationStatusRequest,
    caller: ApplicationsCaller,
    service: Service,
) -> UpdateApplicationStatusResponse:
    """Move an application to a new status (landlord only).

    Only forward transitions are accepted:
    submitted -> reviewing -> interview (optional) -> accepted | rejected.
    A rejected request leaves the application and its timeline untouched.

    Raises:
        NotFoundAppError: 404 if the application does not exist.
        PermissionAppError: 403 if the caller is not the listing landlord.
        ValidationAppError: 400 if the transition is not permitted.
    """
    user = caller.consume()
    result = await service.update_status(
        user,
        application_id,
        status=payload.status,
        note=payload.note,
    )
    return UpdateApplicationStatusResponse(
        ok=result.ok,
        status=result.status.value,
        reviewed_at=result.reviewed_at,
        decision_at=result.decision_at,
    )
