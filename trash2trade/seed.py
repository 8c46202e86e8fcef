"""Default reward catalog and sample data"""
import logging
from datetime import date, time
from typing import Dict

from sqlalchemy.exc import SQLAlchemyError

from trash2trade.models.db import Pickup, Reward, User
from trash2trade.models.enums import PickupStatus, Role, WasteType
from trash2trade.security import hash_password

logger = logging.getLogger(__name__)

DEFAULT_REWARDS = [
    {'name': 'Eco-Friendly Water Bottle', 'description': 'Reusable stainless steel water bottle', 'green_coins_required': 50},
    {'name': 'Recycled Notebook Set', 'description': 'Set of 3 notebooks made from recycled paper', 'green_coins_required': 75},
    {'name': 'Solar Power Bank', 'description': '5000mAh solar-powered portable charger', 'green_coins_required': 150},
    {'name': 'Plant a Tree', 'description': 'We plant a tree in your name', 'green_coins_required': 100},
    {'name': 'Eco-Friendly Tote Bag', 'description': 'Reusable cotton tote bag with eco design', 'green_coins_required': 30},
]

SAMPLE_PASSWORD = 'password123'

SAMPLE_USERS = [
    {'name': 'John Citizen', 'email': 'john@example.com', 'role': Role.CITIZEN, 'green_coins': 50, 'eco_score': 100},
    {'name': 'Jane Collector', 'email': 'jane@example.com', 'role': Role.COLLECTOR, 'green_coins': 0, 'eco_score': 0},
    {'name': 'Green NGO', 'email': 'ngo@example.com', 'role': Role.NGO, 'green_coins': 0, 'eco_score': 0},
]

def seed_rewards(db) -> int:
    """Insert the default catalog if no rewards exist; returns rows inserted"""
    try:
        with db.session() as session:
            if session.query(Reward.id).first() is not None:
                return 0
            session.add_all(Reward(is_active=True, **reward) for reward in DEFAULT_REWARDS)
        logger.info(f"Seeded {len(DEFAULT_REWARDS)} default rewards")
        return len(DEFAULT_REWARDS)
    except SQLAlchemyError as e:
        logger.error(f"Failed to seed rewards: {e}")
        raise

def seed_sample_data(db, bcrypt_rounds: int = 10) -> Dict[str, int]:
    """
    Insert sample accounts and pickups for local development.

    Existing accounts (matched by email) are left untouched, and pickups are
    only added for a citizen that has none yet.

    Returns:
        Dict[str, int]: Number of users and pickups inserted
    """
    inserted = {'users': 0, 'pickups': 0}
    password_hash = hash_password(SAMPLE_PASSWORD, bcrypt_rounds)

    try:
        with db.session() as session:
            accounts = {}
            for sample in SAMPLE_USERS:
                user = session.query(User).filter_by(email=sample['email']).first()
                if not user:
                    user = User(
                        name=sample['name'],
                        email=sample['email'],
                        password=password_hash,
                        role=sample['role'].value,
                        green_coins=sample['green_coins'],
                        eco_score=sample['eco_score']
                    )
                    session.add(user)
                    inserted['users'] += 1
                accounts[sample['role']] = user
            session.flush()

            citizen = accounts[Role.CITIZEN]
            collector = accounts[Role.COLLECTOR]
            if session.query(Pickup.id).filter_by(user_id=citizen.id).first() is None:
                session.add_all([
                    Pickup(user_id=citizen.id, collector_id=collector.id, waste_type=WasteType.PLASTIC.value,
                           quantity=5, address='123 Main St, City', notes='Fragile items',
                           preferred_date=date(2025, 10, 10), preferred_time=time(10, 0),
                           status=PickupStatus.ACCEPTED.value, latitude=40.7128, longitude=-74.0060),
                    Pickup(user_id=citizen.id, collector_id=collector.id, waste_type=WasteType.PAPER.value,
                           quantity=10, address='456 Oak Ave, City', notes='Near the big tree',
                           preferred_date=date(2025, 10, 12), preferred_time=time(14, 0),
                           status=PickupStatus.IN_PROGRESS.value, latitude=40.7589, longitude=-73.9851),
                    Pickup(user_id=citizen.id, collector_id=None, waste_type=WasteType.E_WASTE.value,
                           quantity=3, address='789 Pine Rd, City', notes='Old electronics',
                           preferred_date=date(2025, 10, 15), preferred_time=time(9, 0),
                           status=PickupStatus.PENDING.value, latitude=40.7505, longitude=-73.9934),
                ])
                inserted['pickups'] = 3
    except SQLAlchemyError as e:
        logger.error(f"Failed to seed sample data: {e}")
        raise

    logger.info(f"Seeding complete: {inserted['users']} users, {inserted['pickups']} pickups")
    return inserted
