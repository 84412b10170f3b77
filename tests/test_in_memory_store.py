"""Tests for the in-memory data store."""

from __future__ import annotations

import pytest

from rento.adapters.store import ApplicationRecord, InMemoryRentoStore, TourRecord
from rento.core.errors import ConflictAppError, StoreAppError
from rento.services.tour_status import TourStatus

pytestmark = pytest.mark.asyncio


def _tour(tour_id: str, *, status: TourStatus = TourStatus.REQUESTED, when: str = "2030-01-01T10:00:00+00:00"):
    return TourRecord(
        id=tour_id,
        property_id="prop-1",
        landlord_id="landlord-1",
        tenant_id="tenant-1",
        status=status,
        scheduled_at=when,
    )


async def test_records_are_copied(store: InMemoryRentoStore) -> None:
    record = ApplicationRecord(id="a1", property_id="p", landlord_id="l", tenant_id="t")
    await store.create_application(record)

    record.status = "accepted"
    fetched = await store.get_application("a1")
    fetched.timeline.append({"status": "x", "timestamp": "t"})

    again = await store.get_application("a1")
    assert again.status == "submitted"
    assert again.timeline == []


async def test_update_applies_changes(store: InMemoryRentoStore) -> None:
    await store.create_application(
        ApplicationRecord(id="a1", property_id="p", landlord_id="l", tenant_id="t")
    )

    updated = await store.update_application("a1", {"status": "reviewing", "reviewed_at": "now"})

    assert updated.status == "reviewing"
    assert updated.reviewed_at == "now"


async def test_update_rejects_unknown_columns(store: InMemoryRentoStore) -> None:
    await store.create_application(
        ApplicationRecord(id="a1", property_id="p", landlord_id="l", tenant_id="t")
    )

    with pytest.raises(StoreAppError):
        await store.update_application("a1", {"colour": "blue"})


async def test_update_missing_row_fails(store: InMemoryRentoStore) -> None:
    with pytest.raises(StoreAppError):
        await store.update_tour("nope", {"status": TourStatus.CANCELLED})


async def test_slot_conflict_ignores_final_tours(store: InMemoryRentoStore) -> None:
    await store.create_tour(_tour("t1", status=TourStatus.CANCELLED))
    await store.create_tour(_tour("t2"))

    with pytest.raises(ConflictAppError):
        await store.create_tour(_tour("t3"))

    assert await store.create_tour(_tour("t4", when="2030-01-01T11:00:00+00:00"))


async def test_moving_a_tour_onto_a_booked_slot_conflicts(store: InMemoryRentoStore) -> None:
    await store.create_tour(_tour("t1"))
    await store.create_tour(_tour("t2", when="2030-01-01T11:00:00+00:00"))

    with pytest.raises(ConflictAppError):
        await store.update_tour("t2", {"scheduled_at": "2030-01-01T10:00:00+00:00"})


async def test_same_instant_in_another_offset_conflicts(store: InMemoryRentoStore) -> None:
    await store.create_tour(_tour("t1"))

    with pytest.raises(ConflictAppError):
        await store.create_tour(_tour("t2", when="2030-01-01T12:00:00+02:00"))

    assert await store.create_tour(_tour("t3", when="2030-01-01T10:00:00+02:00"))


async def test_favorites(store: InMemoryRentoStore) -> None:
    assert await store.add_favorite("u1", "p1") is True
    assert await store.add_favorite("u1", "p1") is False
    assert await store.list_favorites("u1") == ["p1"]
    assert await store.remove_favorite("u1", "p1") is True
    assert await store.remove_favorite("u1", "p1") is False
    assert await store.list_favorites("u1") == []


async def test_seed_helpers(store: InMemoryRentoStore) -> None:
    prop = store.seed_property("landlord-1", title="Loft")
    thread = store.seed_thread("tenant-1", property_id=prop.id)

    assert (await store.get_property(prop.id)).title == "Loft"
    assert (await store.get_thread(thread.id)).owner_id == "tenant-1"
    assert await store.get_property("missing") is None
