"""Password hashing and signed tokens"""
import hashlib
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import bcrypt
import jwt

from trash2trade.config import Settings
from trash2trade.errors import InvalidArgumentError, UnauthenticatedError

RESET_PURPOSE = 'password_reset'

# bcrypt only looks at the first 72 bytes and newer releases reject longer input
MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: int = 10) -> str:
    encoded = password.encode()
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise InvalidArgumentError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), hashed.encode())
    except ValueError:
        return False


class TokenService:
    """Issues and verifies HS256 tokens for sessions and password resets"""

    def __init__(self, settings: Settings):
        self.secret = settings.JWT_SECRET
        self.algorithm = settings.JWT_ALGORITHM
        self.expires = timedelta(hours=settings.JWT_EXPIRES_HOURS)
        self.reset_expires = timedelta(minutes=settings.RESET_TOKEN_EXPIRES_MINUTES)

    def _encode(self, claims: Dict[str, Any], lifetime: timedelta) -> str:
        to_encode = {**claims, 'exp': datetime.now(timezone.utc) + lifetime}
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def create_access_token(self, user_id: int, email: str, role: str) -> str:
        return self._encode({'id': user_id, 'email': email, 'role': role}, self.expires)

    def decode_access_token(self, token: str) -> Dict[str, Any]:
        """
        Verify an access token.

        Raises:
            UnauthenticatedError: If the token is malformed, tampered with or expired
        """
        try:
            data = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.PyJWTError:
            raise UnauthenticatedError("Invalid or expired token")
        if data.get('purpose') or not isinstance(data.get('id'), int):
            raise UnauthenticatedError("Invalid or expired token")
        return data

    @staticmethod
    def _fingerprint(password_hash: str) -> str:
        # Changing the password changes the fingerprint, so a reset token works once
        return hashlib.sha256(password_hash.encode()).hexdigest()[:16]

    def create_reset_token(self, user_id: int, password_hash: str) -> str:
        return self._encode(
            {'id': user_id, 'purpose': RESET_PURPOSE, 'pwd': self._fingerprint(password_hash)},
            self.reset_expires
        )

    def decode_reset_token(self, token: str) -> Dict[str, Any]:
        """
        Verify a password reset token.

        Raises:
            InvalidArgumentError: If the token is invalid, expired or not a reset token
        """
        try:
            data = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.PyJWTError:
            raise InvalidArgumentError("Invalid or expired reset token")
        if data.get('purpose') != RESET_PURPOSE or not isinstance(data.get('id'), int):
            raise InvalidArgumentError("Invalid or expired reset token")
        return data

    def reset_token_matches(self, claims: Dict[str, Any], password_hash: str) -> bool:
        return claims.get('pwd') == self._fingerprint(password_hash)
