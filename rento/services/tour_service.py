"""Property tour workflow service.

Tenants request tours; the landlord confirms, completes or cancels them and
the tenant may cancel. Which target status a participant may request is
decided by the same role tables that produce the offered actions
(``rento.services.tour_status``), never by what a client chose to render.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable

from rento.adapters.store.base import AbstractRentoStore, TourRecord
from rento.core.auth import CurrentUser
from rento.core.errors import NotFoundAppError, PermissionAppError, ValidationAppError
from rento.services.tour_status import (
    TourAction,
    TourRole,
    TourStatus,
    actions_for,
    is_final_tour_status,
    is_valid_tour_status_transition,
)
from rento.utils.clock import utc_now
from rento.utils.ids import new_id

logger = logging.getLogger(__name__)


def role_for(user: CurrentUser, tour: TourRecord) -> TourRole | None:
    """Resolve the caller's role on a tour; the landlord role wins."""
    if tour.landlord_id == user.id:
        return TourRole.LANDLORD
    if tour.tenant_id == user.id:
        return TourRole.TENANT
    return None


class TourService:
    """Business operations on property tours.

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

    def _require_future(self, scheduled_at: datetime) -> None:
        if scheduled_at.tzinfo is None:
            raise ValidationAppError(
                code="tour_time_without_timezone",
                message="Tour date must include a timezone offset",
            )
        if scheduled_at <= self._now():
            raise ValidationAppError(
                code="tour_time_in_past",
                message="Tour date must be in the future",
            )

    async def _load(self, tour_id: str) -> TourRecord:
        tour = await self._store.get_tour(tour_id)
        if tour is None:
            raise NotFoundAppError(
                code="tour_not_found",
                message="Tour not found",
                details={"resource": "tour", "resource_id": tour_id},
            )
        return tour

    async def request_tour(
        self,
        user: CurrentUser,
        *,
        property_id: str,
        scheduled_at: datetime,
        timezone: str = "UTC",
        notes: str | None = None,
    ) -> TourRecord:
        """Create a ``requested`` tour of a property for ``user``.

        Raises:
            ValidationAppError: If the time is not in the future, or the caller
                owns the property.
            NotFoundAppError: If the property does not exist.
            ConflictAppError: If the slot is already booked (from the store).
        """
        self._require_future(scheduled_at)

        prop = await self._store.get_property(property_id)
        if prop is None:
            raise NotFoundAppError(
                code="property_not_found",
                message="Property not found",
                details={"resource": "property", "resource_id": property_id},
            )
        if prop.landlord_id == user.id:
            raise ValidationAppError(
                code="own_property_tour",
                message="Landlords cannot request tours of their own property",
            )

        tour = await self._store.create_tour(
            TourRecord(
                id=new_id(),
                property_id=prop.id,
                landlord_id=prop.landlord_id,
                tenant_id=user.id,
                status=TourStatus.REQUESTED,
                scheduled_at=scheduled_at.isoformat(),
                timezone=timezone,
                notes=notes,
                updated_at=self._now().isoformat(),
            )
        )
        logger.info("tour.requested", extra={"tour_id": tour.id, "property_id": prop.id})
        return tour

    async def get_actions(self, user: CurrentUser, tour_id: str) -> tuple[TourRole, TourRecord, list[TourAction]]:
        """Return the caller's role, the tour and the actions offered to them.

        Raises:
            NotFoundAppError: If the tour does not exist.
            PermissionAppError: If the caller is not a participant.
        """
        tour = await self._load(tour_id)
        role = role_for(user, tour)
        if role is None:
            raise PermissionAppError(code="not_tour_participant", message="Not authorized")
        return role, tour, actions_for(role, tour.status)

    async def update_status(
        self,
        user: CurrentUser,
        tour_id: str,
        *,
        status: TourStatus | str,
        scheduled_at: datetime | None = None,
        timezone: str | None = None,
        notes: str | None = None,
        cancelled_reason: str | None = None,
    ) -> TourRecord:
        """Apply a participant's status change to a tour.

        Raises:
            NotFoundAppError: If the tour does not exist.
            PermissionAppError: If the caller is not a participant, or a tenant
                asks for anything but an offered cancellation.
            ValidationAppError: If a landlord asks for a transition that is not
                offered, or the new time is not in the future.
        """
        tour = await self._load(tour_id)
        role = role_for(user, tour)
        if role is None:
            raise PermissionAppError(code="not_tour_participant", message="Not authorized")

        target = TourStatus(status)
        if not is_valid_tour_status_transition(tour.status, target, role):
            logger.info(
                "tour.status_rejected",
                extra={
                    "tour_id": tour_id,
                    "role": role.value,
                    "current_status": tour.status.value,
                    "requested_status": target.value,
                },
            )
            details = {
                "role": role.value,
                "current_status": tour.status.value,
                "requested_status": target.value,
            }
            if role is TourRole.TENANT and target is not TourStatus.CANCELLED:
                raise PermissionAppError(
                    code="tenant_cannot_set_status",
                    message="Tenants can only cancel tours",
                    details=details,
                )
            if is_final_tour_status(tour.status):
                message = f"This tour is already {tour.status.value}"
            else:
                noun = "Landlords" if role is TourRole.LANDLORD else "Tenants"
                message = f"{noun} cannot change a {tour.status.value} tour to {target.value}"
            raise ValidationAppError(
                code="invalid_tour_transition",
                message=message,
                details=details,
            )

        changes: dict[str, Any] = {
            "status": target,
            "updated_at": self._now().isoformat(),
        }
        if scheduled_at is not None:
            self._require_future(scheduled_at)
            changes["scheduled_at"] = scheduled_at.isoformat()
        if timezone:
            changes["timezone"] = timezone
        if notes is not None:
            changes["notes"] = notes
        if cancelled_reason:
            changes["cancelled_reason"] = cancelled_reason

        updated = await self._store.update_tour(tour_id, changes)
        logger.info(
            "tour.status_updated",
            extra={
                "tour_id": tour_id,
                "role": role.value,
                "from_status": tour.status.value,
                "to_status": target.value,
            },
        )
        return updated
