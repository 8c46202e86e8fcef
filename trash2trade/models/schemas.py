"""Request and response models for the HTTP API"""
from datetime import date, datetime, time
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from trash2trade.lifecycle import GREEN_COINS_PER_UNIT
from trash2trade.models.enums import Role, WasteType

# Integer columns are int4 on PostgreSQL
MAX_ID = 2**31 - 1
# Largest quantity whose GreenCoins reward still fits the column
MAX_QUANTITY = MAX_ID // GREEN_COINS_PER_UNIT
# amount is NUMERIC(10, 2)
MAX_AMOUNT = 10**8

# Accounts
class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Display name")
    email: EmailStr
    password: str = Field(..., min_length=1)
    role: Role

class LoginRequest(BaseModel):
    email: EmailStr
    password: str
    role: Role

class ForgotPasswordRequest(BaseModel):
    email: EmailStr

class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

class UserOut(BaseModel):
    """Account without its password hash"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: Role
    green_coins: int
    eco_score: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

# Pickups
class PickupCreate(BaseModel):
    waste_type: WasteType
    quantity: int = Field(..., gt=0, le=MAX_QUANTITY)
    address: str = Field(..., min_length=1)
    notes: Optional[str] = None
    preferred_date: date
    preferred_time: time
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

class PickupStatusUpdate(BaseModel):
    # Validated by the lifecycle rules so unknown values map to "Invalid status"
    status: Optional[str] = None
    collector_id: Optional[int] = None

class PickupOut(BaseModel):
    """Pickup joined with the requester's name and email"""
    id: int
    user_id: int
    collector_id: Optional[int] = None
    waste_type: str
    quantity: int
    address: str
    notes: Optional[str] = None
    preferred_date: date
    preferred_time: time
    status: str
    scheduled_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    green_coins_earned: Optional[int] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None

    @classmethod
    def from_row(cls, pickup) -> 'PickupOut':
        data = {name: getattr(pickup, name) for name in cls.model_fields if hasattr(pickup, name)}
        if pickup.requester is not None:
            data['user_name'] = pickup.requester.name
            data['user_email'] = pickup.requester.email
        return cls(**data)

class PickupStats(BaseModel):
    total_pickups: int = 0
    completed_pickups: int = 0
    total_green_coins: int = 0

# Rewards
class RewardOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    green_coins_required: int
    image_url: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class RedeemRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    reward_id: int = Field(..., alias='rewardId', gt=0, le=MAX_ID)

class UserRewardOut(BaseModel):
    """Redemption record, optionally joined with its catalog reward"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    reward_id: int
    status: str
    redeemed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    name: Optional[str] = None
    description: Optional[str] = None
    green_coins_required: Optional[int] = None
    image_url: Optional[str] = None

    @classmethod
    def from_row(cls, user_reward, with_reward: bool = True) -> 'UserRewardOut':
        out = cls.model_validate(user_reward)
        if with_reward and user_reward.reward is not None:
            out = out.model_copy(update={
                'name': user_reward.reward.name,
                'description': user_reward.reward.description,
                'green_coins_required': user_reward.reward.green_coins_required,
                'image_url': user_reward.reward.image_url,
            })
        return out

# Payments
class PaymentCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    amount: float = Field(..., gt=0, lt=MAX_AMOUNT)
    currency: str = Field('INR', min_length=3, max_length=3)
    payment_method: str = Field(..., alias='paymentMethod', min_length=1, max_length=50)

class PaymentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    amount: float
    currency: str
    payment_method: str
    status: str
    transaction_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
