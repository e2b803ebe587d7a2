"""
Database utility functions for consistent session management across the service.

The scheduler tick, the dispatch task and the setup script all open sessions
outside of a request; they go through these helpers so sessions are always
closed and failed units of work are rolled back.
"""

import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import text
from sqlalchemy.orm import Session

from nerdiversary.db.session import SessionLocal

logger = logging.getLogger(__name__)


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """
    Get a database session with proper cleanup using context manager.

    Usage:
        with get_db_session() as db:
            result = db.query(Model).all()

    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()  # Commit successful operations
    except Exception as e:
        db.rollback()  # Rollback on any exception
        logger.error(f"Database session error: {e}")
        raise
    finally:
        db.close()  # Always close the session


def ping_database(db: Session) -> None:
    """Issue a trivial query so an unreachable store fails fast with SQLAlchemyError."""
    db.execute(text("SELECT 1"))
