# trash2trade/db_config.py
"""Database connection string management"""
from dataclasses import dataclass
from urllib.parse import quote_plus, urlparse

SUPPORTED_SCHEMES = ('postgresql', 'postgresql+psycopg2', 'sqlite')

@dataclass
class DatabaseCredentials:
    """Database credentials container with validation"""
    host: str
    port: str
    name: str
    user: str
    password: str

    def to_connection_string(self) -> str:
        """Generate database connection string with proper escaping"""
        return (
            f"postgresql://{quote_plus(self.user)}:{quote_plus(self.password)}"
            f"@{self.host}:{self.port}/{self.name}"
        )

    @classmethod
    def validate_url(cls, url: str) -> bool:
        """Validate database URL scheme and required parts"""
        try:
            parsed = urlparse(url)
            if parsed.scheme not in SUPPORTED_SCHEMES:
                return False

            # SQLite URLs carry only a path (or nothing for in-memory)
            if parsed.scheme == 'sqlite':
                return True

            if not parsed.hostname:
                return False

            return bool(parsed.path.lstrip('/'))
        except ValueError:
            return False
