# skillswap_sessions/database.py - Database Configuration
import logging
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import declarative_base, sessionmaker

from skillswap_sessions.config import settings
from skillswap_sessions.errors import Unavailable

logger = logging.getLogger(__name__)

# Database URL loaded from .env via skillswap_sessions/config.py
DATABASE_URL = settings.DATABASE_URL


def build_engine(url: str, timeout_seconds: int = None, **kwargs):
    """Create an engine whose connections and statements are time-bounded."""
    timeout = settings.DB_TIMEOUT_SECONDS if timeout_seconds is None else timeout_seconds
    if str(url).startswith("sqlite"):
        connect_args = {"check_same_thread": False, "timeout": timeout}
        return create_engine(url, connect_args=connect_args, **kwargs)
    connect_args = {
        "connect_timeout": timeout,
        "options": f"-c statement_timeout={timeout * 1000}",
    }
    return create_engine(url, connect_args=connect_args, pool_timeout=timeout, **kwargs)


engine = build_engine(DATABASE_URL)

# Session maker
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()


# Dependency to get database session
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def store_guard(db, operation: str):
    """
    Roll back and surface store outages as Unavailable.

    Domain errors raised inside the block are rolled back and re-raised
    unchanged.
    """
    try:
        yield
    except (OperationalError, PoolTimeoutError, TimeoutError) as exc:
        db.rollback()
        logger.exception("Store call failed during %s", operation)
        raise Unavailable(f"Store unavailable during {operation}") from exc
    except Exception:
        db.rollback()
        raise
