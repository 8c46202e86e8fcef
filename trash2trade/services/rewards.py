"""Reward catalog and GreenCoins redemption ledger"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from trash2trade.db import Database
from trash2trade.errors import InsufficientBalanceError, NotFoundError
from trash2trade.models.db import Reward, User, UserReward
from trash2trade.models.enums import RedemptionStatus
from trash2trade.models.schemas import RewardOut, UserRewardOut
from trash2trade.services.common import store_errors

logger = logging.getLogger(__name__)

class RewardService:
    """Catalog queries and the atomic redeem operation"""

    def __init__(self, db: Database):
        self.db = db

    def list_active(self) -> List[RewardOut]:
        """Active catalog rewards, cheapest first"""
        with store_errors(logger, "listing rewards"), self.db.session() as session:
            rewards = session.query(Reward).filter(Reward.is_active.is_(True)).order_by(
                Reward.green_coins_required.asc(), Reward.id.asc()
            ).all()
            return [RewardOut.model_validate(r) for r in rewards]

    @staticmethod
    def _lock_account(session: Session, user_id: int) -> Optional[User]:
        """Load the account row, holding a row lock on engines that support FOR UPDATE"""
        return session.query(User).filter(User.id == user_id).with_for_update().first()

    def redeem(self, user_id: int, reward_id: int) -> UserRewardOut:
        """
        Exchange GreenCoins for a catalog reward.

        The balance check, the debit and the redemption record share one
        transaction. The debit itself is conditional on the balance still
        covering the cost, so two concurrent redemptions cannot both spend
        the same coins even where row locks are unavailable.

        Raises:
            NotFoundError: If the account or an active reward does not exist
            InsufficientBalanceError: If the balance does not cover the cost
        """
        with store_errors(logger, "redeeming reward"), self.db.session() as session:
            user = self._lock_account(session, user_id)
            reward = session.query(Reward).filter(
                Reward.id == reward_id,
                Reward.is_active.is_(True)
            ).first()
            if not user or not reward:
                raise NotFoundError("User or reward not found")

            cost = reward.green_coins_required
            if user.green_coins < cost:
                logger.info(f"User {user_id} cannot afford reward {reward_id} ({user.green_coins} < {cost})")
                raise InsufficientBalanceError()

            debited = session.query(User).filter(
                User.id == user_id,
                User.green_coins >= cost
            ).update({User.green_coins: User.green_coins - cost}, synchronize_session=False)
            if not debited:
                logger.info(f"Concurrent redemption drained user {user_id} before reward {reward_id}")
                raise InsufficientBalanceError()

            user_reward = UserReward(
                user_id=user_id,
                reward_id=reward_id,
                status=RedemptionStatus.PENDING.value
            )
            session.add(user_reward)
            session.flush()
            session.refresh(user_reward)
            logger.info(f"User {user_id} redeemed reward {reward_id} for {cost} GreenCoins")
            return UserRewardOut.from_row(user_reward, with_reward=False)

    def list_for_user(self, user_id: int) -> List[UserRewardOut]:
        """Redemption history joined with reward details, newest first"""
        with store_errors(logger, "listing user rewards"), self.db.session() as session:
            records = session.query(UserReward).filter(UserReward.user_id == user_id).order_by(
                UserReward.created_at.desc(), UserReward.id.desc()
            ).all()
            return [UserRewardOut.from_row(r) for r in records]
