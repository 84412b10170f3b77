"""Tests for the application workflow service against the in-memory store."""

from __future__ import annotations

import pytest

from rento.adapters.store import ApplicationRecord, InMemoryRentoStore
from rento.core.auth import CurrentUser
from rento.core.errors import NotFoundAppError, PermissionAppError, ValidationAppError
from rento.services.application_service import ApplicationService
from rento.services.application_status import ApplicationStatus

pytestmark = pytest.mark.asyncio

LANDLORD = CurrentUser(id="landlord-1")
TENANT = CurrentUser(id="tenant-1")
STRANGER = CurrentUser(id="other-1")

NOW = "2025-06-01T12:00:00+00:00"


@pytest.fixture
def service(store: InMemoryRentoStore, property_record, clock) -> ApplicationService:
    return ApplicationService(store, now=clock)


async def _submit(service: ApplicationService) -> ApplicationRecord:
    return await service.submit_application(
        TENANT, property_id="prop-1", monthly_income=4200, message="Hi!"
    )


async def test_submit_creates_submitted_application(service, store) -> None:
    record = await _submit(service)

    stored = await store.get_application(record.id)
    assert stored.status == "submitted"
    assert stored.landlord_id == "landlord-1"
    assert stored.tenant_id == "tenant-1"
    assert stored.submitted_at == NOW
    assert stored.timeline == []


async def test_submit_unknown_property_is_404(service) -> None:
    with pytest.raises(NotFoundAppError) as exc_info:
        await service.submit_application(TENANT, property_id="missing", monthly_income=1)

    assert exc_info.value.code == "property_not_found"


async def test_full_review_flow(service, store) -> None:
    record = await _submit(service)

    reviewing = await service.update_status(LANDLORD, record.id, status="reviewing", note="Checking refs")
    assert reviewing.status is ApplicationStatus.REVIEWING
    assert reviewing.reviewed_at == NOW
    assert reviewing.decision_at is None

    accepted = await service.update_status(LANDLORD, record.id, status="accepted")
    assert accepted.status is ApplicationStatus.ACCEPTED
    assert accepted.reviewed_at == NOW
    assert accepted.decision_at == NOW

    stored = await store.get_application(record.id)
    assert stored.status == "accepted"
    assert stored.timeline == [
        {"status": "reviewing", "timestamp": NOW, "note": "Checking refs"},
        {"status": "accepted", "timestamp": NOW},
    ]

    with pytest.raises(ValidationAppError) as exc_info:
        await service.update_status(LANDLORD, record.id, status="rejected")

    assert exc_info.value.message == "Cannot change a accepted application to rejected"
    assert len((await store.get_application(record.id)).timeline) == 2


async def test_skipping_review_is_rejected_without_writing(service, store) -> None:
    record = await _submit(service)

    with pytest.raises(ValidationAppError) as exc_info:
        await service.update_status(LANDLORD, record.id, status="accepted")

    assert exc_info.value.code == "invalid_status_transition"
    assert exc_info.value.details == {"current_status": "submitted", "requested_status": "accepted"}
    stored = await store.get_application(record.id)
    assert stored.status == "submitted"
    assert stored.timeline == []
    assert stored.decision_at is None


async def test_decided_application_explains_why_it_is_locked(service) -> None:
    record = await _submit(service)
    await service.update_status(LANDLORD, record.id, status="reviewing")
    await service.update_status(LANDLORD, record.id, status="accepted")

    with pytest.raises(ValidationAppError) as exc_info:
        await service.update_status(LANDLORD, record.id, status="rejected")

    assert exc_info.value.details == {
        "current_status": "accepted",
        "requested_status": "rejected",
        "hint": "A decided application can no longer change status",
    }


async def test_same_status_is_rejected(service) -> None:
    record = await _submit(service)

    with pytest.raises(ValidationAppError):
        await service.update_status(LANDLORD, record.id, status="submitted")


async def test_only_landlord_may_update(service) -> None:
    record = await _submit(service)

    with pytest.raises(PermissionAppError) as exc_info:
        await service.update_status(TENANT, record.id, status="reviewing")

    assert exc_info.value.message == "Only the listing landlord can update this application."


async def test_missing_application_is_404(service) -> None:
    with pytest.raises(NotFoundAppError):
        await service.update_status(LANDLORD, "missing", status="reviewing")


async def test_legacy_row_is_normalized_and_backfilled(store, property_record, clock) -> None:
    await store.create_application(
        ApplicationRecord(
            id="legacy",
            property_id="prop-1",
            landlord_id="landlord-1",
            tenant_id="tenant-1",
            status=None,
            submitted_at=None,
            timeline=None,
        )
    )
    service = ApplicationService(store, now=clock)

    await service.update_status(LANDLORD, "legacy", status="reviewing")

    stored = await store.get_application("legacy")
    assert stored.status == "reviewing"
    assert stored.submitted_at == NOW
    assert stored.reviewed_at == NOW
    assert stored.timeline == [{"status": "reviewing", "timestamp": NOW}]


async def test_approved_alias_counts_as_terminal(store, property_record, clock) -> None:
    await store.create_application(
        ApplicationRecord(
            id="old",
            property_id="prop-1",
            landlord_id="landlord-1",
            tenant_id="tenant-1",
            status="Approved",
        )
    )
    service = ApplicationService(store, now=clock)

    with pytest.raises(ValidationAppError) as exc_info:
        await service.update_status(LANDLORD, "old", status="rejected")

    assert exc_info.value.details["current_status"] == "accepted"


async def test_get_application_hidden_from_strangers(service) -> None:
    record = await _submit(service)

    assert (await service.get_application(TENANT, record.id)).id == record.id
    assert (await service.get_application(LANDLORD, record.id)).id == record.id
    with pytest.raises(NotFoundAppError):
        await service.get_application(STRANGER, record.id)


async def test_allowed_transitions_in_declaration_order(service) -> None:
    record = await _submit(service)
    await service.update_status(LANDLORD, record.id, status="reviewing")
    current = await service.get_application(LANDLORD, record.id)

    assert service.allowed_transitions(current) == ["interview", "accepted", "rejected"]
