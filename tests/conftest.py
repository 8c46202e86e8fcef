from datetime import date, time

import pytest
from fastapi.testclient import TestClient

from trash2trade.app import create_app
from trash2trade.config import Settings
from trash2trade.db import Database
from trash2trade.lifecycle import Actor
from trash2trade.models.db import Pickup, Reward, User
from trash2trade.models.enums import PickupStatus, Role
from trash2trade.security import hash_password

TEST_PASSWORD = 'password123'


@pytest.fixture
def test_settings():
    return Settings(
        DATABASE_URL='sqlite://',
        BCRYPT_ROUNDS=4,
        JWT_SECRET='trash2trade-test-secret-0123456789abcdef',
        DEBUG=True,
    )


@pytest.fixture
def db(test_settings):
    database = Database(test_settings.database_url)
    database.init()
    yield database
    database.dispose()


@pytest.fixture
def file_db(tmp_path):
    """File-backed database so concurrent sessions get their own connections"""
    database = Database(f"sqlite:///{tmp_path / 'trash2trade.db'}")
    database.init()
    yield database
    database.dispose()


@pytest.fixture
def client(test_settings, db):
    app = create_app(test_settings, db)
    with TestClient(app) as test_client:
        yield test_client


def _make_user(database, role=Role.CITIZEN, green_coins=0, email=None, name=None):
    with database.session() as session:
        user = User(
            name=name or f"{role.value.title()} User",
            email=email or f"{role.value}-{session.query(User).count()}@example.com",
            password=hash_password(TEST_PASSWORD, rounds=4),
            role=role.value,
            green_coins=green_coins,
            eco_score=0,
        )
        session.add(user)
        session.flush()
        return Actor(id=user.id, role=role)


def _make_pickup(database, user_id, quantity=5, waste_type='plastic',
                 status=PickupStatus.PENDING, collector_id=None):
    with database.session() as session:
        pickup = Pickup(
            user_id=user_id,
            collector_id=collector_id,
            waste_type=waste_type,
            quantity=quantity,
            address='123 Main St, City',
            preferred_date=date(2025, 10, 10),
            preferred_time=time(10, 0),
            status=status.value,
        )
        session.add(pickup)
        session.flush()
        return pickup.id


def _make_reward(database, cost, name='Test Reward', is_active=True):
    with database.session() as session:
        reward = Reward(name=name, description='for tests', green_coins_required=cost, is_active=is_active)
        session.add(reward)
        session.flush()
        return reward.id


@pytest.fixture
def make_user(db):
    return lambda *args, **kwargs: _make_user(db, *args, **kwargs)


@pytest.fixture
def make_pickup(db):
    return lambda *args, **kwargs: _make_pickup(db, *args, **kwargs)


@pytest.fixture
def make_reward(db):
    return lambda *args, **kwargs: _make_reward(db, *args, **kwargs)


@pytest.fixture
def auth_headers(client):
    """Register an account through the API and return its bearer headers"""
    counter = {'n': 0}

    def _register(role=Role.CITIZEN, email=None):
        counter['n'] += 1
        response = client.post('/api/auth/register', json={
            'name': f"{role.value} {counter['n']}",
            'email': email or f"{role.value}{counter['n']}@example.com",
            'password': TEST_PASSWORD,
            'role': role.value,
        })
        assert response.status_code == 201, response.text
        body = response.json()
        return {'Authorization': f"Bearer {body['token']}"}, body['user']

    return _register


def _pickup_payload(**overrides):
    payload = {
        'waste_type': 'plastic',
        'quantity': 5,
        'address': '123 Main St, City',
        'notes': 'Fragile items',
        'preferred_date': '2025-10-10',
        'preferred_time': '10:00:00',
        'latitude': 40.7128,
        'longitude': -74.006,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def pickup_payload():
    return _pickup_payload
