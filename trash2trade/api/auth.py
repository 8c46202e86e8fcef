"""Authentication and password reset routes"""
from fastapi import APIRouter, Depends, Request

from trash2trade.api.deps import account_service, current_actor
from trash2trade.lifecycle import Actor
from trash2trade.models.schemas import (
    ForgotPasswordRequest, LoginRequest, RegisterRequest, ResetPasswordRequest
)
from trash2trade.services.accounts import AccountService

router = APIRouter(prefix="/auth", tags=["auth"])
password_router = APIRouter(prefix="/password", tags=["auth"])

RESET_REQUESTED_MESSAGE = "If your email is registered, you will receive a password reset link shortly."


@router.post("/register", status_code=201)
def register(payload: RegisterRequest, accounts: AccountService = Depends(account_service)):
    result = accounts.register(payload.name, payload.email, payload.password, payload.role)
    return {"message": "User registered successfully", "token": result.token, "user": result.user}


@router.post("/login")
def login(payload: LoginRequest, accounts: AccountService = Depends(account_service)):
    result = accounts.login(payload.email, payload.password, payload.role)
    return {"message": "Login successful", "token": result.token, "user": result.user}


@router.get("/profile")
def profile(actor: Actor = Depends(current_actor), accounts: AccountService = Depends(account_service)):
    return {"user": accounts.profile(actor.id)}


@password_router.post("/forgot")
def forgot_password(
        payload: ForgotPasswordRequest,
        request: Request,
        accounts: AccountService = Depends(account_service)
):
    ticket = accounts.request_password_reset(payload.email)
    response = {"message": RESET_REQUESTED_MESSAGE}
    if ticket.token and request.app.state.settings.DEBUG:
        response["reset_token"] = ticket.token
    return response


@password_router.post("/reset")
def reset_password(payload: ResetPasswordRequest, accounts: AccountService = Depends(account_service)):
    accounts.reset_password(payload.token, payload.password)
    return {"message": "Password has been reset successfully"}
