"""
Database configuration and session management.
Uses SQLAlchemy 2.0 patterns.
"""

import os
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.orm import sessionmaker, Session

from shared.config.logging import get_logger
from shared.config.settings import settings
from shared.utils.exceptions import InvariantViolationError, StorageUnavailableError

logger = get_logger(__name__)


def _calculate_pool_size() -> int:
    """
    Calculate pool size based on CPU cores.
    Formula: (2 * CPU cores) + 1, capped at the configured maximum.
    """
    cores = os.cpu_count() or 4
    return min(cores * 2 + 1, settings.db_pool_max_size)


def engine_options(database_url: str) -> dict[str, Any]:
    """Engine keyword arguments suited to the database backend."""
    if database_url.startswith("sqlite"):
        # Sessions may be used from worker threads; serialization is done
        # by the per-order lock registry
        return {
            "connect_args": {"check_same_thread": False},
            "echo": settings.db_echo,
        }

    return {
        "pool_pre_ping": True,  # Verify connections before using
        "pool_size": _calculate_pool_size(),
        "max_overflow": settings.db_max_overflow,
        "pool_timeout": settings.db_pool_timeout,
        "pool_recycle": settings.db_pool_recycle,
        "connect_args": {"connect_timeout": settings.db_connect_timeout},
        "echo": settings.db_echo,
    }


def enable_sqlite_foreign_keys(target_engine: Engine) -> None:
    """
    SQLite ignores foreign keys unless asked per connection.
    Needed for ON DELETE CASCADE from orders to item entries.
    """
    if target_engine.dialect.name != "sqlite":
        return

    @event.listens_for(target_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(database_url: str) -> Engine:
    """Create an engine for the given URL with the project defaults."""
    new_engine = create_engine(database_url, **engine_options(database_url))
    enable_sqlite_foreign_keys(new_engine)
    return new_engine


engine = build_engine(settings.database_url)

# Session factory
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
)


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """
    Context manager for database sessions.

    Usage:
        with get_db_context() as db:
            OrderService(db).place_order(...)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def safe_commit(db: Session) -> None:
    """
    Safe commit with automatic rollback on failure.

    Connection-level failures are re-raised as StorageUnavailableError and
    constraint failures as InvariantViolationError; anything else is
    re-raised unchanged after rolling back.
    """
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise InvariantViolationError("constraint rejected commit", error=str(e.orig)) from e
    except (OperationalError, InterfaceError) as e:
        db.rollback()
        raise StorageUnavailableError("commit failed", error=str(e)) from e
    except Exception:
        db.rollback()
        raise


@contextmanager
def unit_of_work(db: Session) -> Generator[Session, None, None]:
    """
    Run a block as one transaction: commit on success, roll back on any error.

    Everything flushed inside the block is discarded if it raises, so a
    failing multi-step operation leaves no partial rows behind.

    Usage:
        with unit_of_work(db):
            order = ledger.create_order(owner)
            tracker.add_item(order.id, "Coffee", "")
    """
    try:
        yield db
    except IntegrityError as e:
        db.rollback()
        raise InvariantViolationError("constraint rejected write", error=str(e.orig)) from e
    except (OperationalError, InterfaceError) as e:
        db.rollback()
        logger.error("Unit of work aborted by storage failure", error=str(e))
        raise StorageUnavailableError("database operation failed", error=str(e)) from e
    except Exception:
        db.rollback()
        raise
    safe_commit(db)
