"""Closed value sets shared by the store, the lifecycle rules and the API"""
from enum import Enum

class Role(str, Enum):
    """Account role"""
    CITIZEN = 'citizen'
    COLLECTOR = 'collector'
    NGO = 'ngo'

class PickupStatus(str, Enum):
    """Pickup lifecycle states"""
    PENDING = 'pending'
    ACCEPTED = 'accepted'
    IN_PROGRESS = 'in-progress'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'

class WasteType(str, Enum):
    PLASTIC = 'plastic'
    E_WASTE = 'e-waste'
    PAPER = 'paper'
    METAL = 'metal'

class RedemptionStatus(str, Enum):
    PENDING = 'pending'
    REDEEMED = 'redeemed'
    DELIVERED = 'delivered'

class PaymentStatus(str, Enum):
    PENDING = 'pending'
    COMPLETED = 'completed'
    FAILED = 'failed'
    REFUNDED = 'refunded'

def values_of(enum_cls) -> tuple:
    """String values of an enum, in declaration order"""
    return tuple(member.value for member in enum_cls)
