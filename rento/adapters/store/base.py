"""Data store interface and record types.

The hosted Postgres backend is an external collaborator; services talk to it
only through ``AbstractRentoStore``. Records are plain dataclasses mirroring
the stored rows. ``update_*`` methods take a mapping of column changes, the
same shape the hosted backend's update call accepts.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Mapping

from rento.services.application_status import ApplicationTimelineEntry
from rento.services.tour_status import TourStatus


@dataclass
class PropertyRecord:
    id: str
    landlord_id: str
    title: str = ""


@dataclass
class ApplicationRecord:
    """A tenant's application for a property.

    ``status`` holds the stored text (legacy values included); it is
    normalized by the status engine before any decision is taken.
    ``timeline`` is the persisted JSON value and may be malformed.
    """

    id: str
    property_id: str
    landlord_id: str
    tenant_id: str
    status: str | None = "submitted"
    monthly_income: int | None = None
    message: str | None = None
    submitted_at: str | None = None
    reviewed_at: str | None = None
    decision_at: str | None = None
    updated_at: str | None = None
    timeline: list[ApplicationTimelineEntry] | Any = field(default_factory=list)


@dataclass
class TourRecord:
    id: str
    property_id: str
    landlord_id: str
    tenant_id: str
    status: TourStatus = TourStatus.REQUESTED
    scheduled_at: str | None = None
    timezone: str = "UTC"
    notes: str | None = None
    cancelled_reason: str | None = None
    updated_at: str | None = None


@dataclass
class MessageThreadRecord:
    id: str
    owner_id: str
    counterpart_id: str | None = None
    property_id: str | None = None
    last_message: str | None = None
    unread_count: int = 0
    updated_at: str | None = None


@dataclass
class MessageRecord:
    id: str
    thread_id: str
    sender_id: str
    body: str
    created_at: str


class AbstractRentoStore(ABC):
    """Persistence operations used by the services.

    Implementations raise ``StoreAppError`` for backend failures and
    ``ConflictAppError`` for constraint violations (e.g. tour slot clashes).
    """

    @abstractmethod
    async def get_property(self, property_id: str) -> PropertyRecord | None: ...

    @abstractmethod
    async def create_application(self, record: ApplicationRecord) -> ApplicationRecord: ...

    @abstractmethod
    async def get_application(self, application_id: str) -> ApplicationRecord | None: ...

    @abstractmethod
    async def update_application(
        self, application_id: str, changes: Mapping[str, Any]
    ) -> ApplicationRecord: ...

    @abstractmethod
    async def create_tour(self, record: TourRecord) -> TourRecord: ...

    @abstractmethod
    async def get_tour(self, tour_id: str) -> TourRecord | None: ...

    @abstractmethod
    async def update_tour(self, tour_id: str, changes: Mapping[str, Any]) -> TourRecord: ...

    @abstractmethod
    async def get_thread(self, thread_id: str) -> MessageThreadRecord | None: ...

    @abstractmethod
    async def update_thread(
        self, thread_id: str, changes: Mapping[str, Any]
    ) -> MessageThreadRecord: ...

    @abstractmethod
    async def create_message(self, record: MessageRecord) -> MessageRecord: ...

    @abstractmethod
    async def add_favorite(self, user_id: str, property_id: str) -> bool:
        """Save a favorite; return False when it already existed."""

    @abstractmethod
    async def remove_favorite(self, user_id: str, property_id: str) -> bool:
        """Remove a favorite; return False when there was nothing to remove."""

    @abstractmethod
    async def list_favorites(self, user_id: str) -> list[str]: ...
