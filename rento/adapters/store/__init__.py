"""Data store adapters.

Services depend on ``AbstractRentoStore``; the in-memory implementation backs
local development and tests.
"""

from rento.adapters.store.base import (
    AbstractRentoStore,
    ApplicationRecord,
    MessageRecord,
    MessageThreadRecord,
    PropertyRecord,
    TourRecord,
)
from rento.adapters.store.in_memory import InMemoryRentoStore

__all__ = [
    "AbstractRentoStore",
    "ApplicationRecord",
    "InMemoryRentoStore",
    "MessageRecord",
    "MessageThreadRecord",
    "PropertyRecord",
    "TourRecord",
]
