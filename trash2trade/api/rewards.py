"""Reward catalog and redemption routes"""
from fastapi import APIRouter, Depends

from trash2trade.api.deps import current_actor, reward_service
from trash2trade.lifecycle import Actor
from trash2trade.models.schemas import RedeemRequest
from trash2trade.services.rewards import RewardService

router = APIRouter(prefix="/rewards", tags=["rewards"])


@router.get("")
def list_rewards(rewards: RewardService = Depends(reward_service)):
    return {"rewards": rewards.list_active()}


@router.post("/redeem")
def redeem_reward(
        payload: RedeemRequest,
        actor: Actor = Depends(current_actor),
        rewards: RewardService = Depends(reward_service)
):
    user_reward = rewards.redeem(actor.id, payload.reward_id)
    return {"message": "Reward redeemed successfully", "userReward": user_reward}


@router.get("/my")
def my_rewards(actor: Actor = Depends(current_actor), rewards: RewardService = Depends(reward_service)):
    return {"rewards": rewards.list_for_user(actor.id)}
