"""Unit tests for the tour status policy."""

from __future__ import annotations

import pytest

from rento.services.tour_status import (
    ActionTone,
    TourRole,
    TourStatus,
    actions_for,
    allowed_tour_transitions,
    is_actionable_status,
    is_final_tour_status,
    is_valid_tour_status_transition,
    landlord_actions_for,
    tenant_actions_for,
)


def _statuses(actions) -> list[str]:
    return [action.status.value for action in actions]


class TestLandlordActions:
    def test_requested_offers_confirm_then_cancel(self) -> None:
        actions = landlord_actions_for("requested")
        assert _statuses(actions) == ["confirmed", "cancelled"]
        assert actions[0].label == "Confirm tour"
        assert actions[0].tone is ActionTone.PRIMARY
        assert actions[1].tone is ActionTone.DANGER

    @pytest.mark.parametrize("status", ["confirmed", "rescheduled"])
    def test_scheduled_tours_offer_complete_then_cancel(self, status: str) -> None:
        actions = landlord_actions_for(status)
        assert _statuses(actions) == ["completed", "cancelled"]
        assert actions[0].label == "Mark completed"

    @pytest.mark.parametrize("status", ["completed", "cancelled"])
    def test_final_statuses_offer_nothing(self, status: str) -> None:
        assert landlord_actions_for(status) == []


class TestTenantActions:
    @pytest.mark.parametrize("status", ["requested", "confirmed", "rescheduled"])
    def test_open_tours_offer_cancel(self, status: str) -> None:
        actions = tenant_actions_for(status)
        assert _statuses(actions) == ["cancelled"]
        assert actions[0].label == "Cancel tour"

    @pytest.mark.parametrize("status", ["completed", "cancelled"])
    def test_final_statuses_offer_nothing(self, status: str) -> None:
        assert tenant_actions_for(status) == []


def test_actions_for_dispatches_on_role() -> None:
    assert actions_for(TourRole.LANDLORD, "requested") == landlord_actions_for("requested")
    assert actions_for("tenant", "confirmed") == tenant_actions_for("confirmed")


def test_action_to_dict() -> None:
    assert tenant_actions_for("requested")[0].to_dict() == {
        "status": "cancelled",
        "label": "Cancel tour",
        "tone": "danger",
    }


def test_unknown_status_raises_value_error() -> None:
    with pytest.raises(ValueError):
        landlord_actions_for("postponed")


@pytest.mark.parametrize(
    "status, expected",
    [("completed", True), ("cancelled", True), ("requested", False), ("rescheduled", False)],
)
def test_is_final(status: str, expected: bool) -> None:
    assert is_final_tour_status(status) is expected


@pytest.mark.parametrize(
    "status, expected",
    [
        ("confirmed", True),
        ("completed", True),
        ("cancelled", True),
        ("requested", False),
        ("rescheduled", False),
        ("bogus", False),
    ],
)
def test_is_actionable(status: str, expected: bool) -> None:
    assert is_actionable_status(status) is expected


class TestTransitionCheck:
    def test_role_specific_checks_follow_offered_actions(self) -> None:
        assert is_valid_tour_status_transition("requested", "confirmed", TourRole.LANDLORD)
        assert not is_valid_tour_status_transition("requested", "confirmed", TourRole.TENANT)
        assert is_valid_tour_status_transition("confirmed", "cancelled", TourRole.TENANT)
        assert not is_valid_tour_status_transition("requested", "completed", TourRole.LANDLORD)

    def test_nothing_leaves_a_final_status(self) -> None:
        for role in TourRole:
            for target in TourStatus:
                assert not is_valid_tour_status_transition("completed", target, role)
                assert not is_valid_tour_status_transition("cancelled", target, role)

    def test_without_role_uses_union(self) -> None:
        assert allowed_tour_transitions("requested") == frozenset(
            {TourStatus.CONFIRMED, TourStatus.CANCELLED}
        )
        assert allowed_tour_transitions("rescheduled") == frozenset(
            {TourStatus.COMPLETED, TourStatus.CANCELLED}
        )

    def test_unknown_target_is_rejected(self) -> None:
        assert is_valid_tour_status_transition("requested", "postponed") is False
