# trash2trade/db.py
"""Database session and connection management"""

import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from trash2trade.models.db import Base
from trash2trade.db_config import DatabaseCredentials

logger = logging.getLogger(__name__)

class Database:
    """Store client owning the engine and session factory.

    Constructed explicitly at process start and handed to every service;
    ``init`` opens it and ``dispose`` closes it.
    """

    def __init__(self, url: str, echo: bool = False, seed_rewards: bool = True):
        """Initialize database manager state"""
        if not DatabaseCredentials.validate_url(url):
            raise ValueError(f"Unsupported database URL scheme: {url.split(':', 1)[0]}")
        self.url = url
        self.echo = echo
        self.seed_rewards = seed_rewards
        self._engine: Optional[Engine] = None
        self._SessionLocal = None

    @property
    def initialized(self) -> bool:
        return self._SessionLocal is not None

    def _engine_options(self) -> dict:
        """Driver options; SQLite needs cross-thread access and a shared in-memory pool"""
        options = {'echo': self.echo}
        if self.url.startswith('sqlite'):
            options['connect_args'] = {'check_same_thread': False}
            if self.url in ('sqlite://', 'sqlite:///:memory:'):
                options['poolclass'] = StaticPool
        return options

    def init(self) -> None:
        """
        Initialize database connection and create tables.

        This should be called once at application startup; later calls are no-ops.

        Raises:
            SQLAlchemyError: If database initialization fails
        """
        if self.initialized:
            return

        try:
            self._engine = create_engine(self.url, **self._engine_options())
            Base.metadata.create_all(self._engine)
            self._SessionLocal = sessionmaker(bind=self._engine, expire_on_commit=False)
            logger.info("Database initialized successfully")

        except SQLAlchemyError as e:
            logger.error(f"Database initialization failed: {e}")
            self._engine = None
            raise

        if self.seed_rewards:
            # Imported here to keep seed data out of the store client's import graph
            from trash2trade.seed import seed_rewards
            seed_rewards(self)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Provide a transactional scope around a series of database operations.

        Usage:
            with db.session() as session:
                session.add(some_object)

        Yields:
            Session: SQLAlchemy database session, committed on exit

        Raises:
            RuntimeError: If database not initialized
            SQLAlchemyError: If database operations fail
        """
        if not self._SessionLocal:
            raise RuntimeError("Database not initialized. Call init() first.")

        session = self._SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        """
        Clean up database connections.
        Should be called during application shutdown.
        """
        if self._engine:
            self._engine.dispose()
            self._engine = None
            self._SessionLocal = None
            logger.info("Database connections closed")
