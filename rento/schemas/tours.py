"""Pydantic schemas for tour endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from rento.core.config import settings
from rento.services.tour_status import ACTIONABLE_TOUR_STATUSES, TourStatus, is_actionable_status


class RequestTourRequest(BaseModel):
    """Tenant request for a property tour."""

    property_id: str = Field(..., min_length=1)
    scheduled_at: datetime = Field(..., description="Timezone-aware ISO-8601 start time.")
    timezone: str = Field(default="UTC", min_length=1)
    notes: str | None = Field(default=None, max_length=settings.app.max_tour_note_chars)


class UpdateTourStatusRequest(BaseModel):
    """Participant request to change a tour's status."""

    tour_id: str = Field(..., min_length=1)
    status: TourStatus
    scheduled_at: datetime | None = None
    timezone: str | None = Field(default=None, min_length=1)
    notes: str | None = Field(default=None, max_length=settings.app.max_tour_note_chars)
    cancelled_reason: str | None = Field(default=None, max_length=settings.app.max_tour_note_chars)

    @field_validator("status")
    @classmethod
    def _actionable(cls, value: TourStatus) -> TourStatus:
        if not is_actionable_status(value):
            allowed = ", ".join(s.value for s in ACTIONABLE_TOUR_STATUSES)
            raise ValueError(f"Invalid status. Expected one of: {allowed}")
        return value


class TourOut(BaseModel):
    id: str
    property_id: str
    landlord_id: str
    tenant_id: str
    status: TourStatus
    scheduled_at: str | None = None
    timezone: str = "UTC"
    notes: str | None = None
    cancelled_reason: str | None = None
    updated_at: str | None = None


class RequestTourResponse(BaseModel):
    tour: TourOut


class UpdateTourStatusResponse(BaseModel):
    success: bool = True
    status: TourStatus


class TourActionOut(BaseModel):
    status: TourStatus
    label: str
    tone: str


class TourActionsResponse(BaseModel):
    role: str
    status: TourStatus
    actions: list[TourActionOut]
