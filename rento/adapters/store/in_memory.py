"""In-memory store used for local development and tests.

Behaves like the hosted backend for the operations the services need,
including the tour slot constraint. Data lives for the lifetime of the
instance only.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import fields, replace
from datetime import datetime, timezone
from typing import Any, Mapping, TypeVar

from rento.adapters.store.base import (
    AbstractRentoStore,
    ApplicationRecord,
    MessageRecord,
    MessageThreadRecord,
    PropertyRecord,
    TourRecord,
)
from rento.core.errors import ConflictAppError, StoreAppError
from rento.services.tour_status import TourStatus, is_final_tour_status
from rento.utils.ids import new_id

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")


def _apply_changes(record: RecordT, changes: Mapping[str, Any]) -> RecordT:
    known = {f.name for f in fields(record)}  # type: ignore[arg-type]
    unknown = set(changes) - known
    if unknown:
        raise StoreAppError(
            code="store_unknown_columns",
            message="Failed to update record",
            details={"context": {"columns": sorted(unknown)}},
        )
    return replace(record, **changes)  # type: ignore[type-var]


def _slot_instant(scheduled_at: str) -> datetime:
    """Parse a stored ISO-8601 time into an aware UTC datetime.

    Slots compare as instants, so 10:00+00:00 and 12:00+02:00 collide. Naive
    values are read as UTC.
    """
    moment = datetime.fromisoformat(scheduled_at)
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


class InMemoryRentoStore(AbstractRentoStore):
    """Dict-backed implementation of ``AbstractRentoStore``.

    Records are deep-copied on the way in and out so callers cannot mutate
    stored state behind the store's back.
    """

    def __init__(self) -> None:
        self._properties: dict[str, PropertyRecord] = {}
        self._applications: dict[str, ApplicationRecord] = {}
        self._tours: dict[str, TourRecord] = {}
        self._threads: dict[str, MessageThreadRecord] = {}
        self._messages: dict[str, MessageRecord] = {}
        self._favorites: dict[str, list[str]] = {}

    # Seeding helpers (development and tests)

    def seed_property(self, landlord_id: str, *, property_id: str | None = None, title: str = "") -> PropertyRecord:
        record = PropertyRecord(id=property_id or new_id(), landlord_id=landlord_id, title=title)
        self._properties[record.id] = record
        return copy.deepcopy(record)

    def seed_thread(
        self,
        owner_id: str,
        *,
        thread_id: str | None = None,
        counterpart_id: str | None = None,
        property_id: str | None = None,
    ) -> MessageThreadRecord:
        record = MessageThreadRecord(
            id=thread_id or new_id(),
            owner_id=owner_id,
            counterpart_id=counterpart_id,
            property_id=property_id,
        )
        self._threads[record.id] = record
        return copy.deepcopy(record)

    def messages_for(self, thread_id: str) -> list[MessageRecord]:
        return [copy.deepcopy(m) for m in self._messages.values() if m.thread_id == thread_id]

    # Properties

    async def get_property(self, property_id: str) -> PropertyRecord | None:
        record = self._properties.get(property_id)
        return copy.deepcopy(record) if record else None

    # Applications

    async def create_application(self, record: ApplicationRecord) -> ApplicationRecord:
        if record.id in self._applications:
            raise ConflictAppError(code="application_exists", message="Application already exists")
        self._applications[record.id] = copy.deepcopy(record)
        return copy.deepcopy(record)

    async def get_application(self, application_id: str) -> ApplicationRecord | None:
        record = self._applications.get(application_id)
        return copy.deepcopy(record) if record else None

    async def update_application(
        self, application_id: str, changes: Mapping[str, Any]
    ) -> ApplicationRecord:
        record = self._applications.get(application_id)
        if record is None:
            raise StoreAppError(code="store_missing_row", message="Failed to update application")
        updated = _apply_changes(record, copy.deepcopy(dict(changes)))
        self._applications[application_id] = updated
        return copy.deepcopy(updated)

    # Tours

    def _ensure_slot_free(self, tour: TourRecord) -> None:
        if is_final_tour_status(tour.status) or not tour.scheduled_at:
            return
        slot = _slot_instant(tour.scheduled_at)
        for other in self._tours.values():
            if (
                other.id != tour.id
                and other.property_id == tour.property_id
                and other.scheduled_at
                and not is_final_tour_status(other.status)
                and _slot_instant(other.scheduled_at) == slot
            ):
                logger.info(
                    "store.tour_slot_conflict",
                    extra={"property_id": tour.property_id, "scheduled_at": tour.scheduled_at},
                )
                raise ConflictAppError(
                    code="tour_slot_conflict",
                    message="This time slot is already booked. Please choose another time.",
                    details={"resource": "tour", "resource_id": other.id},
                )

    async def create_tour(self, record: TourRecord) -> TourRecord:
        self._ensure_slot_free(record)
        self._tours[record.id] = copy.deepcopy(record)
        return copy.deepcopy(record)

    async def get_tour(self, tour_id: str) -> TourRecord | None:
        record = self._tours.get(tour_id)
        return copy.deepcopy(record) if record else None

    async def update_tour(self, tour_id: str, changes: Mapping[str, Any]) -> TourRecord:
        record = self._tours.get(tour_id)
        if record is None:
            raise StoreAppError(code="store_missing_row", message="Failed to update tour")
        updated = _apply_changes(record, changes)
        updated.status = TourStatus(updated.status)
        self._ensure_slot_free(updated)
        self._tours[tour_id] = updated
        return copy.deepcopy(updated)

    # Messages

    async def get_thread(self, thread_id: str) -> MessageThreadRecord | None:
        record = self._threads.get(thread_id)
        return copy.deepcopy(record) if record else None

    async def update_thread(
        self, thread_id: str, changes: Mapping[str, Any]
    ) -> MessageThreadRecord:
        record = self._threads.get(thread_id)
        if record is None:
            raise StoreAppError(code="store_missing_row", message="Failed to update thread")
        updated = _apply_changes(record, changes)
        self._threads[thread_id] = updated
        return copy.deepcopy(updated)

    async def create_message(self, record: MessageRecord) -> MessageRecord:
        self._messages[record.id] = copy.deepcopy(record)
        return copy.deepcopy(record)

    # Favorites

    async def add_favorite(self, user_id: str, property_id: str) -> bool:
        saved = self._favorites.setdefault(user_id, [])
        if property_id in saved:
            return False
        saved.append(property_id)
        return True

    async def remove_favorite(self, user_id: str, property_id: str) -> bool:
        saved = self._favorites.get(user_id, [])
        if property_id not in saved:
            return False
        saved.remove(property_id)
        return True

    async def list_favorites(self, user_id: str) -> list[str]:
        return list(self._favorites.get(user_id, []))
