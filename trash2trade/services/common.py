"""Helpers shared by the store services"""
import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy.exc import SQLAlchemyError

from trash2trade.errors import InternalError

@contextmanager
def store_errors(logger: logging.Logger, action: str) -> Generator[None, None, None]:
    """
    Translate storage failures into InternalError.

    Domain errors pass through untouched; anything raised by SQLAlchemy is
    logged with its detail and replaced by a detail-free InternalError.
    """
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"Database error {action}: {e}")
        raise InternalError()
