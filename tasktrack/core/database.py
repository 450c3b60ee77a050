"""Database engine, session management and bounded-retry store calls."""

import logging
from collections.abc import Callable, Generator
from typing import TypeVar

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker

from tasktrack.core.config import Settings, settings
from tasktrack.core.errors import StoreUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Failures worth one transparent retry: lost connections, statement timeouts, pool exhaustion.
RETRYABLE_ERRORS = (OperationalError, PoolTimeoutError)


def create_db_engine(url: str, config: Settings) -> Engine:
    """Build an engine whose connect, checkout and statement waits are all bounded."""
    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"timeout": config.DB_POOL_TIMEOUT_SEC},
            echo=config.DEBUG,
        )
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_timeout=config.DB_POOL_TIMEOUT_SEC,
        connect_args={
            "connect_timeout": max(1, int(config.DB_POOL_TIMEOUT_SEC)),
            "options": f"-c statement_timeout={config.DB_STATEMENT_TIMEOUT_MS}",
        },
        echo=config.DEBUG,
    )


engine = create_db_engine(settings.DATABASE_URL, settings)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False


def run_in_store(db: Session, operation: Callable[[Session], T]) -> T:
    """
    Run one unit of work against the store, retrying once on a transient failure.

    The session is rolled back before the retry so the operation starts from a
    clean transaction. A second transient failure raises StoreUnavailable.
    Domain errors raised by the operation propagate untouched.
    """
    try:
        return operation(db)
    except RETRYABLE_ERRORS as first:
        db.rollback()
        logger.warning("Store call failed, retrying once: %s", type(first).__name__)
    try:
        return operation(db)
    except RETRYABLE_ERRORS as second:
        db.rollback()
        logger.error("Store call failed after retry: %s", type(second).__name__)
        raise StoreUnavailable() from second
