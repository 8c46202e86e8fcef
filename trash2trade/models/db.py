"""SQLAlchemy database models for accounts, pickups, rewards and payments"""
from datetime import datetime, timezone
from sqlalchemy import (
    Column, Integer, String, Float, Boolean, Date, DateTime, Time, Text, Numeric,
    ForeignKey, CheckConstraint, Index
)
from sqlalchemy.orm import declarative_base, relationship

from trash2trade.models.enums import (
    Role, PickupStatus, WasteType, RedemptionStatus, PaymentStatus, values_of
)

Base = declarative_base()

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

def _one_of(column: str, enum_cls) -> str:
    allowed = ", ".join(f"'{value}'" for value in values_of(enum_cls))
    return f"{column} IN ({allowed})"

class User(Base):
    """
    Account of a citizen, collector or NGO.
    green_coins is the spendable balance; eco_score is display-only.
    """
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, index=True)
    green_coins = Column(Integer, nullable=False, default=0)
    eco_score = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint(_one_of('role', Role), name='check_user_role'),
        CheckConstraint('green_coins >= 0', name='check_non_negative_green_coins'),
        CheckConstraint('eco_score >= 0', name='check_non_negative_eco_score'),
    )

class Pickup(Base):
    """
    Waste collection request.
    collector_id stays NULL until a collector claims the pickup.
    """
    __tablename__ = 'pickups'

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    collector_id = Column(Integer, ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True)
    waste_type = Column(String(20), nullable=False)
    quantity = Column(Integer, nullable=False)
    address = Column(Text, nullable=False)
    notes = Column(Text, nullable=True)
    preferred_date = Column(Date, nullable=False)
    preferred_time = Column(Time, nullable=False)
    status = Column(String(20), nullable=False, default=PickupStatus.PENDING.value, index=True)
    scheduled_date = Column(DateTime(timezone=True), nullable=True)
    completed_date = Column(DateTime(timezone=True), nullable=True)
    green_coins_earned = Column(Integer, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    requester = relationship('User', foreign_keys=[user_id], lazy='joined')

    __table_args__ = (
        CheckConstraint(_one_of('waste_type', WasteType), name='check_pickup_waste_type'),
        CheckConstraint(_one_of('status', PickupStatus), name='check_pickup_status'),
        CheckConstraint('quantity > 0', name='check_positive_quantity'),
    )

class Reward(Base):
    """Catalog item redeemable for GreenCoins"""
    __tablename__ = 'rewards'

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    green_coins_required = Column(Integer, nullable=False)
    image_url = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint('green_coins_required > 0', name='check_positive_reward_cost'),
    )

class UserReward(Base):
    """
    Redemption record linking an account to a catalog reward.
    Only created by the redemption ledger.
    """
    __tablename__ = 'user_rewards'

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    reward_id = Column(Integer, ForeignKey('rewards.id', ondelete='CASCADE'), nullable=False)
    status = Column(String(20), nullable=False, default=RedemptionStatus.PENDING.value)
    redeemed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    reward = relationship('Reward', lazy='joined')

    __table_args__ = (
        CheckConstraint(_one_of('status', RedemptionStatus), name='check_user_reward_status'),
        Index('idx_user_rewards_user_created', 'user_id', 'created_at'),
    )

class Payment(Base):
    """Simulated monetary transaction"""
    __tablename__ = 'payments'

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    amount = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    currency = Column(String(3), nullable=False, default='INR')
    payment_method = Column(String(50), nullable=False)
    status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value)
    transaction_id = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint(_one_of('status', PaymentStatus), name='check_payment_status'),
        CheckConstraint('amount > 0', name='check_positive_amount'),
    )
