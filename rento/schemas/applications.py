"""Pydantic schemas for rental application endpoints."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from rento.core.config import settings


RequestableApplicationStatus = Literal["submitted", "reviewing", "interview", "accepted", "rejected"]


class CreateApplicationRequest(BaseModel):
    """Tenant submission of an application for a property."""

    property_id: str = Field(..., min_length=1, description="Property being applied for.")
    monthly_income: int = Field(..., ge=0, description="Declared gross monthly income.")
    message: str | None = Field(
        default=None,
        max_length=settings.app.max_message_chars,
        description="Optional note to the landlord.",
    )


class CreatedApplication(BaseModel):
    id: str


class CreateApplicationResponse(BaseModel):
    application: CreatedApplication


class UpdateApplicationStatusRequest(BaseModel):
    """Landlord request to move an application to a new status."""

    status: RequestableApplicationStatus = Field(
        ..., description="Target status. 'draft' cannot be requested."
    )
    note: str | None = Field(
        default=None,
        max_length=settings.app.max_status_note_chars,
        description="Optional note recorded on the timeline entry.",
    )


class UpdateApplicationStatusResponse(BaseModel):
    """Outcome of a successful status change."""

    ok: bool = Field(default=True)
    status: str = Field(..., description="Canonical status after the change.")
    reviewed_at: str | None = Field(
        default=None, description="ISO-8601 time the application entered review."
    )
    decision_at: str | None = Field(
        default=None, description="ISO-8601 time the application was accepted or rejected."
    )


class TimelineEntryOut(BaseModel):
    status: str
    timestamp: str
    note: str | None = None


class ApplicationOut(BaseModel):
    """Application as returned to its landlord or tenant."""

    id: str
    property_id: str
    landlord_id: str
    tenant_id: str
    status: str
    monthly_income: int | None = None
    message: str | None = None
    submitted_at: str | None = None
    reviewed_at: str | None = None
    decision_at: str | None = None
    updated_at: str | None = None
    timeline: list[TimelineEntryOut] = Field(default_factory=list)
    allowed_transitions: list[str] = Field(
        default_factory=list,
        description="Statuses the landlord may move this application into next.",
    )
