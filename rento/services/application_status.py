"""Rental application status workflow.

Single source of truth for application statuses, the legacy aliases accepted
from stored data, and the forward-only transition table:

    draft      -> submitted
    submitted  -> reviewing
    reviewing  -> interview | accepted | rejected
    interview  -> accepted | rejected
    accepted, rejected: terminal

Every function here is pure and never raises for domain outcomes; callers turn
a ``False`` transition check into a user-facing error and skip the write.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, NotRequired, TypedDict

logger = logging.getLogger(__name__)


class ApplicationStatus(str, Enum):
    """Canonical application statuses."""

    DRAFT = "draft"
    SUBMITTED = "submitted"
    REVIEWING = "reviewing"
    INTERVIEW = "interview"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


DEFAULT_APPLICATION_STATUS = ApplicationStatus.SUBMITTED

TERMINAL_APPLICATION_STATUSES: frozenset[ApplicationStatus] = frozenset(
    {ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED}
)

_STATUS_ALIASES: dict[str, ApplicationStatus] = {
    **{status.value: status for status in ApplicationStatus},
    "approved": ApplicationStatus.ACCEPTED,
}

_TRANSITIONS: dict[ApplicationStatus, frozenset[ApplicationStatus]] = {
    ApplicationStatus.DRAFT: frozenset({ApplicationStatus.SUBMITTED}),
    ApplicationStatus.SUBMITTED: frozenset({ApplicationStatus.REVIEWING}),
    ApplicationStatus.REVIEWING: frozenset(
        {
            ApplicationStatus.INTERVIEW,
            ApplicationStatus.ACCEPTED,
            ApplicationStatus.REJECTED,
        }
    ),
    ApplicationStatus.INTERVIEW: frozenset(
        {ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED}
    ),
    ApplicationStatus.ACCEPTED: frozenset(),
    ApplicationStatus.REJECTED: frozenset(),
}

_missing = set(ApplicationStatus) - set(_TRANSITIONS)
if _missing:
    raise RuntimeError(f"Application statuses without transition rules: {sorted(_missing)}")


class ApplicationTimelineEntry(TypedDict):
    """One audit entry as persisted in the application's ``timeline`` column."""

    status: str
    timestamp: str
    note: NotRequired[str | None]


@dataclass(frozen=True)
class StatusTimestampFlags:
    """Which upstream timestamps a move into a status should stamp.

    Attributes:
        reviewed: Set ``reviewed_at`` (and backfill ``submitted_at`` if absent).
        decision: Set ``decision_at``.
    """

    reviewed: bool = False
    decision: bool = False


def normalize_application_status(value: ApplicationStatus | str | None) -> ApplicationStatus:
    """Map raw or legacy status text onto a canonical status.

    Lookup is case-insensitive and accepts ``approved`` as an alias of
    ``accepted``. Empty or unrecognised values fall back to ``submitted`` so
    legacy rows stay reviewable; unrecognised text is logged.

    Examples:
        >>> normalize_application_status("approved")
        <ApplicationStatus.ACCEPTED: 'accepted'>
        >>> normalize_application_status(None)
        <ApplicationStatus.SUBMITTED: 'submitted'>
    """
    if isinstance(value, ApplicationStatus):
        return value
    if not value:
        return DEFAULT_APPLICATION_STATUS

    key = str(value).strip().lower()
    status = _STATUS_ALIASES.get(key)
    if status is None:
        logger.warning(
            "application_status.unknown_value",
            extra={"raw_status": key[:64], "fallback": DEFAULT_APPLICATION_STATUS.value},
        )
        return DEFAULT_APPLICATION_STATUS
    return status


def canonical_status_to_storage(status: ApplicationStatus) -> str:
    """Return the value written to the store for a canonical status."""
    return status.value


def allowed_application_transitions(
    current: ApplicationStatus | str | None,
) -> frozenset[ApplicationStatus]:
    """Statuses reachable in one step from ``current`` (after normalization)."""
    return _TRANSITIONS[normalize_application_status(current)]


def is_terminal_application_status(status: ApplicationStatus | str | None) -> bool:
    return normalize_application_status(status) in TERMINAL_APPLICATION_STATUSES


def is_valid_application_status_transition(
    current: ApplicationStatus | str | None,
    next_status: ApplicationStatus | str | None,
) -> bool:
    """Check whether ``current -> next_status`` is a permitted state change.

    Both sides are normalized first. Self-transitions are rejected so every
    accepted write represents a real change.
    """
    current_normalized = normalize_application_status(current)
    next_normalized = normalize_application_status(next_status)
    if current_normalized == next_normalized:
        return False
    return next_normalized in _TRANSITIONS[current_normalized]


def get_next_status_timestamps(status: ApplicationStatus | str | None) -> StatusTimestampFlags:
    """Classify which timestamps a move into ``status`` should set."""
    normalized = normalize_application_status(status)
    return StatusTimestampFlags(
        reviewed=normalized is ApplicationStatus.REVIEWING,
        decision=normalized in TERMINAL_APPLICATION_STATUSES,
    )


def build_timeline_entry(
    status: ApplicationStatus | str,
    timestamp: str,
    note: str | None = None,
) -> ApplicationTimelineEntry:
    entry: ApplicationTimelineEntry = {
        "status": normalize_application_status(status).value,
        "timestamp": timestamp,
    }
    if note is not None:
        entry["note"] = note
    return entry


def append_timeline_entry(
    timeline: Any,
    entry: ApplicationTimelineEntry,
) -> list[ApplicationTimelineEntry]:
    """Return a new timeline with ``entry`` appended.

    A stored timeline that is not a list (``None``, a malformed JSON value)
    is treated as empty. The input is never mutated.
    """
    current = timeline if isinstance(timeline, list) else []
    return [*current, entry]
