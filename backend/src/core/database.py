# pyright: reportMissingTypeStubs=false
"""
Database configuration and session management.

This module sets up SQLAlchemy database connection, session management,
audit stamping and provides dependency injection for database sessions
in FastAPI routes.
"""

import logging
from contextlib import contextmanager
from typing import Generator, Optional

from fastapi import HTTPException
from sqlalchemy import create_engine, event, inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, object_session, sessionmaker
from sqlalchemy.orm.attributes import set_committed_value

from core.config import DATABASE_URL
from core.constants import DB_POOL_RECYCLE_SECONDS, SYSTEM_ACTOR

logger = logging.getLogger(__name__)

# Session.info key holding the identity that audit stamping records
ACTOR_INFO_KEY = "actor"

# Audit columns stamped on insert and never changed afterwards
CREATION_STAMP_FIELDS = ("created_at", "created_by")

# Create SQLAlchemy engine
engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,  # Verify connections before use
    pool_recycle=DB_POOL_RECYCLE_SECONDS,
    echo=False,
    future=True,
)

# Create configured SessionLocal class
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,  # Don't expire objects after commit
)


# Create Base class for declarative models
class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


def set_session_actor(db: Session, actor: Optional[str]) -> None:
    """Bind the acting user to a session so audit stamping can record it."""
    db.info[ACTOR_INFO_KEY] = actor


def get_session_actor(db: Optional[Session]) -> str:
    """Return the actor bound to a session, or the system actor if none."""
    if db is None:
        return SYSTEM_ACTOR
    return db.info.get(ACTOR_INFO_KEY) or SYSTEM_ACTOR


# Audit stamping runs inside the flush, so it commits or rolls back
# together with the rest of the change set.
@event.listens_for(Base, "before_insert", propagate=True)  # type: ignore
def receive_before_insert(mapper, connection, target):  # type: ignore
    """Stamp created_at/created_by on newly inserted auditable rows."""
    # Import here to avoid circular import
    from models.base import AuditMixin
    from utils.datetime_utils import utc_now

    if isinstance(target, AuditMixin):
        target.created_at = utc_now()
        target.created_by = get_session_actor(object_session(target))
    elif "created_at" in mapper.columns and getattr(target, "created_at", None) is None:  # type: ignore
        setattr(target, "created_at", utc_now())  # type: ignore


@event.listens_for(Base, "before_update", propagate=True)  # type: ignore
def receive_before_update(mapper, connection, target):  # type: ignore
    """Stamp last_modified_at/last_modified_by on modified auditable rows."""
    from models.base import AuditMixin
    from utils.datetime_utils import utc_now

    if not isinstance(target, AuditMixin):
        return

    # created_* are write-once: put back the stored values before the UPDATE is built
    attrs = inspect(target).attrs
    for key in CREATION_STAMP_FIELDS:
        history = attrs[key].history
        if history.deleted:
            logger.warning(f"Ignoring change to {key} on {type(target).__name__} {target.id}")
            set_committed_value(target, key, history.deleted[0])

    session = object_session(target)
    # before_update also fires for rows flagged dirty without net column changes
    if session is not None and not session.is_modified(target, include_collections=False):
        return

    target.last_modified_at = utc_now()
    target.last_modified_by = get_session_actor(session)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency to provide database sessions.

    Yields a database session that is automatically closed after the request.
    Handles cleanup even if an exception occurs during request processing.

    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    except SQLAlchemyError as e:
        logger.exception(f"Database error: {e}")
        db.rollback()
        raise
    except HTTPException:
        # Don't log HTTPExceptions as errors - they're expected business logic
        db.rollback()
        raise
    except Exception as e:
        logger.exception(f"Unexpected error in database session: {e}")
        db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def get_db_context(actor: Optional[str] = None) -> Generator[Session, None, None]:
    """
    Context manager for database sessions outside of FastAPI dependency injection.

    Useful for startup tasks and scripts where you need manual session
    management. The session is committed on success and rolled back on error.

    Args:
        actor: Optional identity recorded by audit stamping (defaults to "System")

    Example:
        ```python
        with get_db_context() as db:
            patient = db.query(Patient).filter(Patient.id == patient_id).first()
        ```
    """
    db = SessionLocal()
    set_session_actor(db, actor)
    try:
        yield db
        db.commit()
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Database transaction failed: {e}")
        raise
    finally:
        db.close()


def create_tables() -> None:
    """
    Create all database tables defined in SQLAlchemy models.

    Safe to call multiple times - will not recreate existing tables.

    Note:
        In production, prefer using Alembic migrations instead of this function.
    """
    # Import models so they're registered with Base.metadata
    import models  # noqa: F401

    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")
    except SQLAlchemyError as e:
        logger.exception(f"Failed to create database tables: {e}")
        raise


def drop_tables() -> None:
    """
    Drop all database tables defined in SQLAlchemy models.

    WARNING: This will permanently delete all data in the tables!
    """
    import models  # noqa: F401

    try:
        Base.metadata.drop_all(bind=engine)
        logger.info("Database tables dropped successfully")
    except SQLAlchemyError as e:
        logger.exception(f"Failed to drop database tables: {e}")
        raise
