from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from trash2trade.errors import ForbiddenError, InvalidArgumentError, InvalidStateError
from trash2trade.lifecycle import (
    Actor, ALLOWED_TRANSITIONS, can_view, ensure_can_delete, green_coins_for, plan_transition
)
from trash2trade.models.enums import PickupStatus, Role

CITIZEN = Actor(id=1, role=Role.CITIZEN)
OTHER_CITIZEN = Actor(id=2, role=Role.CITIZEN)
COLLECTOR = Actor(id=10, role=Role.COLLECTOR)
OTHER_COLLECTOR = Actor(id=11, role=Role.COLLECTOR)
NGO = Actor(id=20, role=Role.NGO)
NOW = datetime(2025, 10, 10, 12, 0, 0)


def pickup(status=PickupStatus.PENDING, collector_id=None, user_id=1, quantity=5):
    return SimpleNamespace(user_id=user_id, collector_id=collector_id, status=status.value, quantity=quantity)


def test_terminal_states_have_no_exits():
    assert ALLOWED_TRANSITIONS[PickupStatus.COMPLETED] == frozenset()
    assert ALLOWED_TRANSITIONS[PickupStatus.CANCELLED] == frozenset()
    for status in (PickupStatus.PENDING, PickupStatus.ACCEPTED, PickupStatus.IN_PROGRESS):
        assert PickupStatus.CANCELLED in ALLOWED_TRANSITIONS[status]


def test_green_coins_rate():
    assert green_coins_for(5) == 50
    assert green_coins_for(1) == 10


@pytest.mark.parametrize('status', [None, '', 'done', 'PENDING'])
def test_unknown_or_missing_status_is_invalid_argument(status):
    with pytest.raises(InvalidArgumentError):
        plan_transition(COLLECTOR, pickup(), status)


def test_claim_assigns_collector_and_schedules():
    transition = plan_transition(COLLECTOR, pickup(), 'accepted', now=NOW)

    assert transition.is_claim
    assert transition.values() == {
        'status': 'accepted',
        'collector_id': COLLECTOR.id,
        'scheduled_date': NOW,
    }
    assert transition.expected_status == PickupStatus.PENDING
    assert transition.expected_collector_id is None


def test_claim_may_name_the_acting_collector():
    transition = plan_transition(COLLECTOR, pickup(), 'accepted', collector_id=COLLECTOR.id, now=NOW)
    assert transition.collector_id == COLLECTOR.id


def test_claim_cannot_assign_someone_else():
    with pytest.raises(InvalidArgumentError):
        plan_transition(COLLECTOR, pickup(), 'accepted', collector_id=OTHER_COLLECTOR.id)


def test_direct_collector_write_outside_claim_is_rejected():
    assigned = pickup(PickupStatus.ACCEPTED, collector_id=COLLECTOR.id)
    with pytest.raises(InvalidArgumentError):
        plan_transition(COLLECTOR, assigned, 'in-progress', collector_id=OTHER_COLLECTOR.id)


def test_claiming_a_cancelled_unassigned_pickup_is_invalid_state():
    with pytest.raises(InvalidStateError):
        plan_transition(COLLECTOR, pickup(PickupStatus.CANCELLED), 'accepted')


def test_other_collector_cannot_touch_assigned_pickup():
    assigned = pickup(PickupStatus.ACCEPTED, collector_id=COLLECTOR.id)
    with pytest.raises(ForbiddenError):
        plan_transition(OTHER_COLLECTOR, assigned, 'in-progress')
    with pytest.raises(ForbiddenError):
        plan_transition(OTHER_COLLECTOR, assigned, 'accepted')


def test_collector_cannot_act_on_unassigned_pickup_except_claim():
    with pytest.raises(ForbiddenError):
        plan_transition(COLLECTOR, pickup(), 'in-progress')


def test_completion_stamps_date_and_computes_reward():
    in_progress = pickup(PickupStatus.IN_PROGRESS, collector_id=COLLECTOR.id, quantity=7)
    transition = plan_transition(COLLECTOR, in_progress, 'completed', now=NOW)

    assert transition.values() == {
        'status': 'completed',
        'completed_date': NOW,
        'green_coins_earned': 70,
    }
    assert not transition.is_claim


def test_in_progress_has_no_side_effects():
    accepted = pickup(PickupStatus.ACCEPTED, collector_id=COLLECTOR.id)
    transition = plan_transition(COLLECTOR, accepted, 'in-progress', now=NOW)
    assert transition.values() == {'status': 'in-progress'}


@pytest.mark.parametrize('current,target', [
    (PickupStatus.PENDING, 'in-progress'),
    (PickupStatus.ACCEPTED, 'completed'),
    (PickupStatus.ACCEPTED, 'accepted'),
    (PickupStatus.IN_PROGRESS, 'pending'),
    (PickupStatus.COMPLETED, 'cancelled'),
    (PickupStatus.COMPLETED, 'completed'),
    (PickupStatus.CANCELLED, 'in-progress'),
])
def test_illegal_edges_are_invalid_state(current, target):
    assigned = pickup(current, collector_id=COLLECTOR.id)
    with pytest.raises(InvalidStateError):
        plan_transition(COLLECTOR, assigned, target)


def test_citizen_may_cancel_own_pickup():
    transition = plan_transition(CITIZEN, pickup(), 'cancelled')
    assert transition.values() == {'status': 'cancelled'}


@pytest.mark.parametrize('target', ['accepted', 'in-progress', 'completed', 'pending'])
def test_citizen_may_only_cancel(target):
    with pytest.raises(ForbiddenError, match='only cancel'):
        plan_transition(CITIZEN, pickup(), target)


def test_citizen_cannot_touch_someone_elses_pickup():
    with pytest.raises(ForbiddenError):
        plan_transition(OTHER_CITIZEN, pickup(), 'cancelled')


def test_citizen_cannot_cancel_completed_pickup():
    done = pickup(PickupStatus.COMPLETED, collector_id=COLLECTOR.id)
    with pytest.raises(InvalidStateError):
        plan_transition(CITIZEN, done, 'cancelled')


@pytest.mark.parametrize('target', ['accepted', 'cancelled', 'completed'])
def test_ngo_cannot_change_status(target):
    with pytest.raises(ForbiddenError):
        plan_transition(NGO, pickup(), target)


def test_read_access():
    unassigned = pickup()
    assigned = pickup(PickupStatus.ACCEPTED, collector_id=COLLECTOR.id)

    assert can_view(CITIZEN, unassigned)
    assert not can_view(OTHER_CITIZEN, unassigned)
    assert can_view(COLLECTOR, unassigned)
    assert can_view(COLLECTOR, assigned)
    assert not can_view(OTHER_COLLECTOR, assigned)
    assert can_view(NGO, assigned)


def test_delete_rules():
    ensure_can_delete(CITIZEN, pickup())

    with pytest.raises(ForbiddenError):
        ensure_can_delete(OTHER_CITIZEN, pickup())
    with pytest.raises(ForbiddenError):
        ensure_can_delete(COLLECTOR, pickup())
    with pytest.raises(InvalidStateError):
        ensure_can_delete(CITIZEN, pickup(PickupStatus.ACCEPTED, collector_id=COLLECTOR.id))


def test_default_timestamps_are_timezone_aware_utc():
    in_progress = pickup(PickupStatus.IN_PROGRESS, collector_id=COLLECTOR.id)
    transition = plan_transition(COLLECTOR, in_progress, 'completed')
    assert transition.completed_date.tzinfo == timezone.utc
