"""FastAPI dependencies: services and the authenticated caller"""
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from trash2trade.errors import UnauthenticatedError
from trash2trade.lifecycle import Actor
from trash2trade.services.accounts import AccountService
from trash2trade.services.payments import PaymentService
from trash2trade.services.pickups import PickupService
from trash2trade.services.rewards import RewardService

# auto_error=False so a missing header is a 401 from our own error handler
security = HTTPBearer(auto_error=False)


def account_service(request: Request) -> AccountService:
    return request.app.state.accounts


def pickup_service(request: Request) -> PickupService:
    return request.app.state.pickups


def reward_service(request: Request) -> RewardService:
    return request.app.state.rewards


def payment_service(request: Request) -> PaymentService:
    return request.app.state.payments


def current_actor(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
        accounts: AccountService = Depends(account_service)
) -> Actor:
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("Authentication required")
    return accounts.authenticate(credentials.credentials)
