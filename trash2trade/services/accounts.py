"""Account registration, login and password reset"""
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError

from trash2trade.config import Settings
from trash2trade.db import Database
from trash2trade.errors import ConflictError, InvalidArgumentError, NotFoundError, UnauthenticatedError
from trash2trade.lifecycle import Actor
from trash2trade.models.db import User
from trash2trade.models.enums import Role
from trash2trade.models.schemas import UserOut
from trash2trade.security import TokenService, hash_password, verify_password
from trash2trade.services.common import store_errors

logger = logging.getLogger(__name__)

@dataclass
class AuthResult:
    """Access token plus the account it was issued for"""
    token: str
    user: UserOut

@dataclass
class PasswordResetTicket:
    """Outcome of a reset request; token is None for unknown emails"""
    token: Optional[str]

class AccountService:
    """Manages accounts and resolves the caller of each request"""

    def __init__(self, db: Database, settings: Settings):
        self.db = db
        self.tokens = TokenService(settings)
        self.bcrypt_rounds = settings.BCRYPT_ROUNDS

    def _issue(self, user: User) -> AuthResult:
        token = self.tokens.create_access_token(user.id, user.email, user.role)
        return AuthResult(token=token, user=UserOut.model_validate(user))

    def register(self, name: str, email: str, password: str, role: Role) -> AuthResult:
        """
        Create a new account with a zero GreenCoins balance.

        Raises:
            ConflictError: If the email is already registered
        """
        password_hash = hash_password(password, self.bcrypt_rounds)
        with store_errors(logger, "registering user"):
            try:
                with self.db.session() as session:
                    if session.query(User).filter_by(email=email).first():
                        raise ConflictError("User with this email already exists")

                    user = User(
                        name=name,
                        email=email,
                        password=password_hash,
                        role=role.value,
                        green_coins=0,
                        eco_score=0
                    )
                    session.add(user)
                    session.flush()
                    session.refresh(user)
                    result = self._issue(user)
            except IntegrityError:
                # Lost a race against a concurrent registration of the same email
                raise ConflictError("User with this email already exists")

        logger.info(f"Registered {role.value} account {result.user.id}")
        return result

    def login(self, email: str, password: str, role: Role) -> AuthResult:
        with store_errors(logger, "logging in"), self.db.session() as session:
            user = session.query(User).filter_by(email=email).first()
            if not user or user.role != role.value or not verify_password(password, user.password):
                logger.warning(f"Failed {role.value} login attempt")
                raise UnauthenticatedError("Invalid credentials")
            return self._issue(user)

    def profile(self, user_id: int) -> UserOut:
        with store_errors(logger, "loading profile"), self.db.session() as session:
            user = session.query(User).filter_by(id=user_id).first()
            if not user:
                raise NotFoundError("User not found")
            return UserOut.model_validate(user)

    def authenticate(self, token: str) -> Actor:
        """
        Resolve a bearer token to the acting account.

        Raises:
            UnauthenticatedError: If the token is invalid or the account no longer exists
        """
        claims = self.tokens.decode_access_token(token)
        with store_errors(logger, "authenticating"), self.db.session() as session:
            user = session.query(User).filter_by(id=claims['id']).first()
            if not user:
                raise UnauthenticatedError("Invalid or expired token")
            return Actor(id=user.id, role=Role(user.role))

    def request_password_reset(self, email: str) -> PasswordResetTicket:
        """
        Issue a reset token for a known email; unknown emails are not revealed.

        The token is handed back to the caller, nothing is sent by email.
        """
        with store_errors(logger, "requesting password reset"), self.db.session() as session:
            user = session.query(User).filter_by(email=email).first()
            if not user:
                return PasswordResetTicket(token=None)
            logger.info(f"Password reset requested for user {user.id}")
            return PasswordResetTicket(token=self.tokens.create_reset_token(user.id, user.password))

    def reset_password(self, token: str, password: str) -> None:
        """
        Replace the password of the account named by a reset token.

        Raises:
            InvalidArgumentError: If the token is invalid, expired or already used
        """
        claims = self.tokens.decode_reset_token(token)
        password_hash = hash_password(password, self.bcrypt_rounds)
        with store_errors(logger, "resetting password"), self.db.session() as session:
            user = session.query(User).filter_by(id=claims['id']).first()
            if not user or not self.tokens.reset_token_matches(claims, user.password):
                raise InvalidArgumentError("Invalid or expired reset token")
            user.password = password_hash
            logger.info(f"Password reset for user {user.id}")
