"""FastAPI application factory"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from trash2trade.api import auth, payments, pickups, rewards
from trash2trade.config import Settings, settings as default_settings
from trash2trade.db import Database
from trash2trade.errors import Trash2TradeError
from trash2trade.services.accounts import AccountService
from trash2trade.services.payments import PaymentService
from trash2trade.services.pickups import PickupService
from trash2trade.services.rewards import RewardService

logger = logging.getLogger(__name__)

APP_NAME = "Trash2Trade API"


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query", "header"))
    return f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")


def register_error_handlers(app: FastAPI) -> None:
    """Translate every failure into a {"message": ...} body"""

    @app.exception_handler(Trash2TradeError)
    async def domain_error_handler(request: Request, exc: Trash2TradeError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc!r}")
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"message": _validation_message(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = "Route not found" if exc.status_code == 404 else str(exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"message": message})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"message": "Internal server error"})


def create_app(app_settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """
    Build the API around an explicitly constructed store client.

    Args:
        app_settings: Settings to use, defaults to the environment settings
        database: Store client, built from the settings when omitted

    Returns:
        FastAPI: Application whose lifespan opens and closes the database
    """
    app_settings = app_settings or default_settings
    if database is None:
        database = Database(
            app_settings.database_url,
            echo=app_settings.DB_ECHO,
            seed_rewards=app_settings.SEED_REWARDS
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.init()
        try:
            yield
        finally:
            database.dispose()

    app = FastAPI(title=APP_NAME, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = app_settings
    app.state.db = database
    app.state.accounts = AccountService(database, app_settings)
    app.state.pickups = PickupService(database)
    app.state.rewards = RewardService(database)
    app.state.payments = PaymentService(database)

    prefix = app_settings.API_PREFIX.rstrip("/")
    for router in (auth.router, auth.password_router, pickups.router, rewards.router, payments.router):
        app.include_router(router, prefix=prefix)

    @app.get(f"{prefix}/health")
    def health():
        return {"message": "Server is running!", "timestamp": datetime.now(timezone.utc).isoformat()}

    register_error_handlers(app)
    return app
