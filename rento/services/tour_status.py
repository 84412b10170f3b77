"""Property tour status policy.

The per-role action tables below are the only place tour transitions are
defined. Both the action listing shown to clients and the server-side check in
``TourService.update_status`` read them, so what is offered and what is
accepted cannot drift apart.

    landlord: requested   -> confirmed | cancelled
              confirmed   -> completed | cancelled
              rescheduled -> completed | cancelled
    tenant:   any non-final status -> cancelled
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TourStatus(str, Enum):
    REQUESTED = "requested"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"


class TourRole(str, Enum):
    LANDLORD = "landlord"
    TENANT = "tenant"


class ActionTone(str, Enum):
    PRIMARY = "primary"
    DANGER = "danger"


@dataclass(frozen=True)
class TourAction:
    """An action a participant may take on a tour.

    Attributes:
        status: Target status the action moves the tour into.
        label: Short button label.
        tone: Visual weight hint for clients.
    """

    status: TourStatus
    label: str
    tone: ActionTone

    def to_dict(self) -> dict[str, str]:
        return {"status": self.status.value, "label": self.label, "tone": self.tone.value}


FINAL_TOUR_STATUSES: tuple[TourStatus, ...] = (TourStatus.COMPLETED, TourStatus.CANCELLED)

# Statuses a participant may request through the update endpoint.
ACTIONABLE_TOUR_STATUSES: tuple[TourStatus, ...] = (
    TourStatus.CONFIRMED,
    TourStatus.COMPLETED,
    TourStatus.CANCELLED,
)

_CONFIRM = TourAction(TourStatus.CONFIRMED, "Confirm tour", ActionTone.PRIMARY)
_COMPLETE = TourAction(TourStatus.COMPLETED, "Mark completed", ActionTone.PRIMARY)
_CANCEL = TourAction(TourStatus.CANCELLED, "Cancel tour", ActionTone.DANGER)

_LANDLORD_ACTIONS: dict[TourStatus, tuple[TourAction, ...]] = {
    TourStatus.REQUESTED: (_CONFIRM, _CANCEL),
    TourStatus.CONFIRMED: (_COMPLETE, _CANCEL),
    TourStatus.RESCHEDULED: (_COMPLETE, _CANCEL),
    TourStatus.COMPLETED: (),
    TourStatus.CANCELLED: (),
}

_TENANT_ACTIONS: dict[TourStatus, tuple[TourAction, ...]] = {
    status: () if status in FINAL_TOUR_STATUSES else (_CANCEL,) for status in TourStatus
}

_ACTIONS_BY_ROLE: dict[TourRole, dict[TourStatus, tuple[TourAction, ...]]] = {
    TourRole.LANDLORD: _LANDLORD_ACTIONS,
    TourRole.TENANT: _TENANT_ACTIONS,
}

_missing = set(TourStatus) - set(_LANDLORD_ACTIONS)
if _missing:
    raise RuntimeError(f"Tour statuses without landlord actions: {sorted(_missing)}")


def landlord_actions_for(status: TourStatus | str) -> list[TourAction]:
    return list(_LANDLORD_ACTIONS[TourStatus(status)])


def tenant_actions_for(status: TourStatus | str) -> list[TourAction]:
    return list(_TENANT_ACTIONS[TourStatus(status)])


def actions_for(role: TourRole | str, status: TourStatus | str) -> list[TourAction]:
    """Actions offered to ``role`` for a tour currently in ``status``."""
    return list(_ACTIONS_BY_ROLE[TourRole(role)][TourStatus(status)])


def is_final_tour_status(status: TourStatus | str) -> bool:
    return TourStatus(status) in FINAL_TOUR_STATUSES


def is_actionable_status(status: TourStatus | str) -> bool:
    """Whether ``status`` may be requested through the update endpoint."""
    try:
        return TourStatus(status) in ACTIONABLE_TOUR_STATUSES
    except ValueError:
        return False


def allowed_tour_transitions(
    current: TourStatus | str,
    role: TourRole | str | None = None,
) -> frozenset[TourStatus]:
    """Target statuses reachable from ``current``.

    With a role, only that role's offered actions count; without one, the
    union over both roles is returned.
    """
    current_status = TourStatus(current)
    roles = (TourRole(role),) if role is not None else tuple(TourRole)
    return frozenset(
        action.status
        for each_role in roles
        for action in _ACTIONS_BY_ROLE[each_role][current_status]
    )


def is_valid_tour_status_transition(
    current: TourStatus | str,
    next_status: TourStatus | str,
    role: TourRole | str | None = None,
) -> bool:
    """Server-side transition check mirroring the offered actions.

    Unknown status text is rejected rather than coerced.
    """
    try:
        target = TourStatus(next_status)
        return target in allowed_tour_transitions(current, role)
    except ValueError:
        return False
