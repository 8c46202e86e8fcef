"""Pickup lifecycle rules: permitted transitions, role checks and rewards.

Nothing here touches the store. ``plan_transition`` inspects a pickup and the
acting account and either raises a domain error or returns the exact set of
column changes the store must apply.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, FrozenSet, Optional, Any

from trash2trade.errors import ForbiddenError, InvalidArgumentError, InvalidStateError
from trash2trade.models.enums import PickupStatus, Role

GREEN_COINS_PER_UNIT = 10

ALLOWED_TRANSITIONS: Dict[PickupStatus, FrozenSet[PickupStatus]] = {
    PickupStatus.PENDING: frozenset({PickupStatus.ACCEPTED, PickupStatus.CANCELLED}),
    PickupStatus.ACCEPTED: frozenset({PickupStatus.IN_PROGRESS, PickupStatus.CANCELLED}),
    PickupStatus.IN_PROGRESS: frozenset({PickupStatus.COMPLETED, PickupStatus.CANCELLED}),
    PickupStatus.COMPLETED: frozenset(),
    PickupStatus.CANCELLED: frozenset(),
}

@dataclass(frozen=True)
class Actor:
    """The authenticated account performing an operation"""
    id: int
    role: Role

@dataclass(frozen=True)
class PickupTransition:
    """
    Column changes produced by one legal status transition.

    expected_status and expected_collector_id are what the caller observed;
    the store applies the change only if the row still matches them.
    """
    status: PickupStatus
    expected_status: PickupStatus
    expected_collector_id: Optional[int]
    is_claim: bool = False
    collector_id: Optional[int] = None
    scheduled_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    green_coins_earned: Optional[int] = None

    def values(self) -> Dict[str, Any]:
        """Columns to write, keyed by column name"""
        values: Dict[str, Any] = {'status': self.status.value}
        if self.is_claim:
            values['collector_id'] = self.collector_id
        if self.scheduled_date is not None:
            values['scheduled_date'] = self.scheduled_date
        if self.completed_date is not None:
            values['completed_date'] = self.completed_date
            values['green_coins_earned'] = self.green_coins_earned
        return values

def green_coins_for(quantity: int) -> int:
    """GreenCoins earned for completing a pickup of the given quantity"""
    return GREEN_COINS_PER_UNIT * quantity

def parse_status(status: Optional[str]) -> PickupStatus:
    if status is None or status == '':
        raise InvalidArgumentError("Status is required")
    try:
        return PickupStatus(status)
    except ValueError:
        raise InvalidArgumentError("Invalid status")

def _authorize(actor: Actor, pickup, target: PickupStatus) -> bool:
    """Check the actor may request ``target``; returns True for a claim"""
    if actor.role == Role.CITIZEN:
        if pickup.user_id != actor.id:
            raise ForbiddenError("Access denied")
        if target != PickupStatus.CANCELLED:
            raise ForbiddenError("Citizens can only cancel pickups")
        return False
    elif actor.role == Role.COLLECTOR:
        if pickup.collector_id is None and target == PickupStatus.ACCEPTED:
            return True
        if pickup.collector_id != actor.id:
            raise ForbiddenError("Access denied")
        return False
    elif actor.role == Role.NGO:
        raise ForbiddenError("NGOs cannot change pickup status")
    raise ForbiddenError("Access denied")

def plan_transition(
        actor: Actor,
        pickup,
        status: Optional[str],
        collector_id: Optional[int] = None,
        now: Optional[datetime] = None
) -> PickupTransition:
    """
    Decide whether ``actor`` may move ``pickup`` to ``status``.

    Args:
        actor: Acting account
        pickup: Current pickup row (anything with user_id, collector_id, status, quantity)
        status: Requested status as sent by the client
        collector_id: Requested collector assignment, only valid as a self-claim
        now: Timestamp to stamp, defaults to the current UTC time

    Returns:
        PickupTransition: The changes to apply

    Raises:
        InvalidArgumentError: Unknown/missing status or an illegal collector write
        ForbiddenError: The actor's role or ownership does not permit the change
        InvalidStateError: The current status does not lead to the requested one
    """
    target = parse_status(status)
    is_claim = _authorize(actor, pickup, target)

    if collector_id is not None and not (is_claim and collector_id == actor.id):
        raise InvalidArgumentError("A collector can only be assigned by claiming the pickup")

    current = PickupStatus(pickup.status)
    if target not in ALLOWED_TRANSITIONS[current]:
        raise InvalidStateError(f"Cannot change status from {current.value} to {target.value}")

    now = now or datetime.now(timezone.utc)
    changes: Dict[str, Any] = {}
    if target == PickupStatus.ACCEPTED:
        changes['scheduled_date'] = now
    elif target == PickupStatus.COMPLETED:
        changes['completed_date'] = now
        changes['green_coins_earned'] = green_coins_for(pickup.quantity)

    return PickupTransition(
        status=target,
        expected_status=current,
        expected_collector_id=pickup.collector_id,
        is_claim=is_claim,
        collector_id=actor.id if is_claim else None,
        **changes
    )

def can_view(actor: Actor, pickup) -> bool:
    """Read access: requester, assigned collector, any collector while unassigned, NGOs"""
    if actor.role == Role.CITIZEN:
        return pickup.user_id == actor.id
    elif actor.role == Role.COLLECTOR:
        return pickup.collector_id is None or pickup.collector_id == actor.id
    elif actor.role == Role.NGO:
        return True
    return False

def ensure_can_view(actor: Actor, pickup) -> None:
    if not can_view(actor, pickup):
        raise ForbiddenError("Access denied")

def ensure_can_delete(actor: Actor, pickup) -> None:
    """Only the requester may delete, and only while the pickup is pending"""
    if pickup.user_id != actor.id:
        raise ForbiddenError("Access denied")
    if pickup.status != PickupStatus.PENDING.value:
        raise InvalidStateError("Only pending pickups can be deleted")
