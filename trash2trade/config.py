"""Application configuration and environment settings"""
from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from trash2trade.db_config import DatabaseCredentials

class Settings(BaseSettings):
    """Application settings loaded from environment variables"""
    # Database settings
    DATABASE_URL: Optional[str] = Field(None, description="Full SQLAlchemy database URL, overrides DB_*")
    DB_USER: str = Field("postgres", description="Database user")
    DB_PASSWORD: str = Field("postgres", description="Database password")
    DB_HOST: str = Field("localhost", description="Database host")
    DB_PORT: str = Field("5432", description="Database port")
    DB_NAME: str = Field("trash2trade", description="Database name")
    DB_ECHO: bool = Field(False, description="Log emitted SQL statements")

    # Auth settings
    JWT_SECRET: str = Field("trash2trade_secret_key", description="Secret used to sign access tokens")
    JWT_ALGORITHM: str = Field("HS256", description="Signing algorithm for access tokens")
    JWT_EXPIRES_HOURS: int = Field(24, description="Access token lifetime in hours")
    RESET_TOKEN_EXPIRES_MINUTES: int = Field(30, description="Password reset token lifetime in minutes")
    BCRYPT_ROUNDS: int = Field(10, ge=4, le=31, description="bcrypt cost factor")

    # HTTP settings
    API_PREFIX: str = Field("/api", description="Prefix for every API route")
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")
    HOST: str = Field("0.0.0.0", description="Bind address for the server")
    PORT: int = Field(5001, description="Bind port for the server")

    SEED_REWARDS: bool = Field(True, description="Insert the default reward catalog when it is empty")
    DEBUG: bool = Field(False, description="Expose development helpers such as reset tokens")

    @property
    def database_url(self) -> str:
        """Resolved database URL"""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return DatabaseCredentials(
            host=self.DB_HOST,
            port=self.DB_PORT,
            name=self.DB_NAME,
            user=self.DB_USER,
            password=self.DB_PASSWORD,
        ).to_connection_string()

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=True,
        extra='ignore'
    )

settings = Settings()
