"""Rental application workflow service.

Orchestrates the status engine against the data store:
- tenants submit applications for a property
- the property's landlord moves them through review to a decision
- every accepted status change appends one timeline entry and stamps the
  matching ``*_at`` columns in the same write

Invalid transitions are rejected before anything is written, so the stored
timeline only ever records changes that actually happened.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable

from rento.adapters.store.base import AbstractRentoStore, ApplicationRecord
from rento.core.auth import CurrentUser
from rento.core.errors import (
    ErrorDetails,
    NotFoundAppError,
    PermissionAppError,
    ValidationAppError,
)
from rento.services.application_status import (
    ApplicationStatus,
    allowed_application_transitions,
    append_timeline_entry,
    build_timeline_entry,
    canonical_status_to_storage,
    get_next_status_timestamps,
    is_terminal_application_status,
    is_valid_application_status_transition,
    normalize_application_status,
)
from rento.utils.clock import utc_now
from rento.utils.ids import new_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusUpdateResult:
    """What the caller reports back after a successful status change."""

    status: ApplicationStatus
    reviewed_at: str | None
    decision_at: str | None
    ok: bool = True


class ApplicationService:
    """Business operations on rental applications.

    Args:
        store: Data store collaborator.
        now: Clock returning an aware UTC datetime (injectable for tests).
    """

    def __init__(
        self,
        store: AbstractRentoStore,
        *,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._now = now

    async def submit_application(
        self,
        user: CurrentUser,
        *,
        property_id: str,
        monthly_income: int,
        message: str | None = None,
    ) -> ApplicationRecord:
        """Create a ``submitted`` application from ``user`` for a property.

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

        now = self._now().isoformat()
        record = await self._store.create_application(
            ApplicationRecord(
                id=new_id(),
                property_id=prop.id,
                landlord_id=prop.landlord_id,
                tenant_id=user.id,
                status=canonical_status_to_storage(ApplicationStatus.SUBMITTED),
                monthly_income=monthly_income,
                message=message,
                submitted_at=now,
                updated_at=now,
                timeline=[],
            )
        )

        logger.info(
            "application.created",
            extra={"application_id": record.id, "property_id": prop.id},
        )
        return record

    async def get_application(self, user: CurrentUser, application_id: str) -> ApplicationRecord:
        """Fetch an application visible to its landlord or tenant.

        Raises:
            NotFoundAppError: If missing, or not visible to ``user``.
        """
        record = await self._store.get_application(application_id)
        if record is None or user.id not in (record.landlord_id, record.tenant_id):
            raise NotFoundAppError(
                code="application_not_found",
                message="Application not found",
                details={"resource": "application", "resource_id": application_id},
            )
        return record

    def allowed_transitions(self, record: ApplicationRecord) -> list[str]:
        allowed = allowed_application_transitions(record.status)
        return [status.value for status in ApplicationStatus if status in allowed]

    async def update_status(
        self,
        user: CurrentUser,
        application_id: str,
        *,
        status: ApplicationStatus | str,
        note: str | None = None,
    ) -> StatusUpdateResult:
        """Move an application to ``status`` on behalf of its landlord.

        Raises:
            NotFoundAppError: If the application does not exist.
            PermissionAppError: If ``user`` is not the property's landlord.
            ValidationAppError: If the transition is not permitted.
        """
        record = await self._store.get_application(application_id)
        if record is None:
            raise NotFoundAppError(
                code="application_not_found",
                message="Application not found",
                details={"resource": "application", "resource_id": application_id},
            )

        if record.landlord_id != user.id:
            raise PermissionAppError(
                code="not_application_landlord",
                message="Only the listing landlord can update this application.",
                details={"resource": "application", "resource_id": application_id},
            )

        current = normalize_application_status(record.status)
        target = normalize_application_status(status)

        if not is_valid_application_status_transition(current, target):
            logger.info(
                "application.status_rejected",
                extra={
                    "application_id": application_id,
                    "current_status": current.value,
                    "requested_status": target.value,
                },
            )
            details: ErrorDetails = {
                "current_status": current.value,
                "requested_status": target.value,
            }
            if is_terminal_application_status(current):
                details["hint"] = "A decided application can no longer change status"
            raise ValidationAppError(
                code="invalid_status_transition",
                message=f"Cannot change a {current.value} application to {target.value}",
                details=details,
            )

        now = self._now().isoformat()
        changes: dict[str, Any] = {
            "status": canonical_status_to_storage(target),
            "updated_at": now,
            "timeline": append_timeline_entry(
                record.timeline, build_timeline_entry(target, now, note)
            ),
        }

        stamps = get_next_status_timestamps(target)
        if stamps.reviewed:
            changes["reviewed_at"] = now
            if not record.submitted_at:
                changes["submitted_at"] = now
        if stamps.decision:
            changes["decision_at"] = now

        await self._store.update_application(application_id, changes)

        logger.info(
            "application.status_updated",
            extra={
                "application_id": application_id,
                "from_status": current.value,
                "to_status": target.value,
                "has_note": note is not None,
            },
        )

        return StatusUpdateResult(
            status=target,
            reviewed_at=changes.get("reviewed_at", record.reviewed_at),
            decision_at=changes.get("decision_at", record.decision_at),
        )
