"""Pickup store operations driven by the lifecycle rules"""
import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from trash2trade.db import Database
from trash2trade.errors import ConflictError, ForbiddenError, NotFoundError, InvalidStateError
from trash2trade.lifecycle import (
    Actor, PickupTransition, plan_transition, ensure_can_view, ensure_can_delete
)
from trash2trade.models.db import Pickup, User
from trash2trade.models.enums import PickupStatus, Role
from trash2trade.models.schemas import PickupCreate, PickupOut, PickupStats
from trash2trade.services.common import store_errors

logger = logging.getLogger(__name__)

class PickupService:
    """Creates, queries and transitions pickups"""

    def __init__(self, db: Database):
        self.db = db

    @staticmethod
    def _get(session: Session, pickup_id: int) -> Pickup:
        pickup = session.query(Pickup).filter_by(id=pickup_id).first()
        if not pickup:
            raise NotFoundError("Pickup not found")
        return pickup

    def create(self, actor: Actor, data: PickupCreate) -> PickupOut:
        """Create a pending pickup requested by a citizen"""
        if actor.role != Role.CITIZEN:
            raise ForbiddenError("Only citizens can request pickups")

        with store_errors(logger, "creating pickup"), self.db.session() as session:
            pickup = Pickup(
                user_id=actor.id,
                waste_type=data.waste_type.value,
                quantity=data.quantity,
                address=data.address,
                notes=data.notes,
                preferred_date=data.preferred_date,
                preferred_time=data.preferred_time,
                status=PickupStatus.PENDING.value,
                latitude=data.latitude,
                longitude=data.longitude
            )
            session.add(pickup)
            session.flush()
            session.refresh(pickup)
            logger.info(f"Citizen {actor.id} requested pickup {pickup.id} ({pickup.waste_type} x{pickup.quantity})")
            return PickupOut.from_row(pickup)

    def _list(self, action: str, *criteria) -> List[PickupOut]:
        with store_errors(logger, action), self.db.session() as session:
            pickups = session.query(Pickup).filter(*criteria).order_by(
                Pickup.created_at.desc(), Pickup.id.desc()
            ).all()
            return [PickupOut.from_row(p) for p in pickups]

    def list_for_requester(self, user_id: int) -> List[PickupOut]:
        return self._list("listing requester pickups", Pickup.user_id == user_id)

    def list_for_collector(self, collector_id: int) -> List[PickupOut]:
        return self._list("listing collector pickups", Pickup.collector_id == collector_id)

    def list_available(self) -> List[PickupOut]:
        """Pending pickups open for claiming"""
        return self._list("listing available pickups", Pickup.status == PickupStatus.PENDING.value)

    def get(self, actor: Actor, pickup_id: int) -> PickupOut:
        with store_errors(logger, "loading pickup"), self.db.session() as session:
            pickup = self._get(session, pickup_id)
            ensure_can_view(actor, pickup)
            return PickupOut.from_row(pickup)

    @staticmethod
    def _apply(session: Session, pickup_id: int, transition: PickupTransition) -> int:
        """Write the transition only if the row still looks as it did when planned"""
        query = session.query(Pickup).filter(
            Pickup.id == pickup_id,
            Pickup.status == transition.expected_status.value
        )
        if transition.expected_collector_id is None:
            query = query.filter(Pickup.collector_id.is_(None))
        else:
            query = query.filter(Pickup.collector_id == transition.expected_collector_id)
        return query.update(transition.values(), synchronize_session=False)

    def update_status(
            self,
            actor: Actor,
            pickup_id: int,
            status: Optional[str],
            collector_id: Optional[int] = None
    ) -> PickupOut:
        """
        Move a pickup through its lifecycle.

        A collector claiming an unassigned pickup and every later transition
        are single conditional UPDATEs, so two racing requests can never both
        succeed. Completion credits the requester with the GreenCoins earned
        in the same transaction.

        Raises:
            NotFoundError, InvalidArgumentError, ForbiddenError, InvalidStateError, ConflictError
        """
        with store_errors(logger, "updating pickup status"), self.db.session() as session:
            pickup = self._get(session, pickup_id)
            try:
                transition = plan_transition(actor, pickup, status, collector_id)
            except ForbiddenError as e:
                logger.warning(f"Denied {actor.role.value} {actor.id} setting pickup {pickup_id} to {status}: {e.message}")
                raise

            if self._apply(session, pickup_id, transition) == 0:
                # Someone else changed the row first; judge the request against what they left behind
                session.refresh(pickup)
                logger.info(f"Pickup {pickup_id} changed concurrently, re-evaluating request from {actor.role.value} {actor.id}")
                try:
                    plan_transition(actor, pickup, status, collector_id)
                except ForbiddenError as e:
                    logger.warning(f"Denied {actor.role.value} {actor.id} setting pickup {pickup_id} to {status}: {e.message}")
                    raise
                raise ConflictError("Pickup was modified by another request, please retry")

            if transition.status == PickupStatus.COMPLETED:
                session.query(User).filter(User.id == pickup.user_id).update(
                    {User.green_coins: User.green_coins + transition.green_coins_earned},
                    synchronize_session=False
                )
                logger.info(f"Credited {transition.green_coins_earned} GreenCoins to user {pickup.user_id} for pickup {pickup_id}")

            session.refresh(pickup)
            if transition.is_claim:
                logger.info(f"Collector {actor.id} claimed pickup {pickup_id}")
            else:
                logger.info(f"Pickup {pickup_id} moved to {transition.status.value} by {actor.role.value} {actor.id}")
            return PickupOut.from_row(pickup)

    def delete(self, actor: Actor, pickup_id: int) -> None:
        """Delete a pending pickup owned by the actor"""
        with store_errors(logger, "deleting pickup"), self.db.session() as session:
            pickup = self._get(session, pickup_id)
            ensure_can_delete(actor, pickup)
            session.expunge(pickup)

            deleted = session.query(Pickup).filter(
                Pickup.id == pickup_id,
                Pickup.status == PickupStatus.PENDING.value
            ).delete(synchronize_session=False)
            if not deleted:
                raise InvalidStateError("Only pending pickups can be deleted")
            logger.info(f"User {actor.id} deleted pickup {pickup_id}")

    def stats(self, user_id: int) -> PickupStats:
        """Pickup totals for the pickups an account requested"""
        with store_errors(logger, "computing pickup stats"), self.db.session() as session:
            total = session.query(func.count(Pickup.id)).filter(Pickup.user_id == user_id).scalar()
            completed, coins = session.query(
                func.count(Pickup.id),
                func.coalesce(func.sum(Pickup.green_coins_earned), 0)
            ).filter(
                Pickup.user_id == user_id,
                Pickup.status == PickupStatus.COMPLETED.value
            ).one()
            return PickupStats(
                total_pickups=total or 0,
                completed_pickups=completed or 0,
                total_green_coins=int(coins or 0)
            )
