"""
Soft delete query and mutation helpers.

These work for any model carrying the SoftDeleteMixin columns. Filtering is
explicit: store functions take an ``include_deleted`` flag and call
``filter_active`` themselves, so the visibility rule is readable at each
call site.

The mutation helpers only change the tracked instance. The caller commits,
so the change lands in one transaction together with audit stamping.
"""

import logging
from typing import Optional, Type, TypeVar

from sqlalchemy.orm import Query, Session

from models.base import SoftDeleteMixin
from utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)

# Type variable for soft-deletable models
T = TypeVar('T', bound=SoftDeleteMixin)


def include_deleted(query: Query[T]) -> Query[T]:
    """
    Return the query unchanged, with no soft delete predicate.

    Exists so call sites that intentionally see deleted rows say so.
    """
    return query


def filter_active(query: Query[T], model: Type[T]) -> Query[T]:
    """
    Apply soft delete filter to a query.

    Args:
        query: Base query for a soft-deletable model
        model: The model class the query selects

    Returns:
        Query filtered to exclude soft-deleted rows
    """
    return query.filter(model.is_deleted == False)  # noqa: E712


def only_deleted(query: Query[T], model: Type[T]) -> Query[T]:
    """Restrict a query to soft-deleted rows."""
    return query.filter(model.is_deleted == True)  # noqa: E712


def _find_any(db: Session, model: Type[T], entity_id: int) -> Optional[T]:
    # Deleted rows must be found too: they may be re-deleted or restored
    return include_deleted(db.query(model)).filter(model.id == entity_id).first()  # type: ignore[attr-defined]


def soft_delete(db: Session, model: Type[T], entity_id: int, deleted_by: str) -> bool:
    """
    Flag a row as deleted.

    Args:
        db: Database session
        model: Soft-deletable model class
        entity_id: Primary key of the row
        deleted_by: Identity performing the deletion

    Returns:
        False if no row matches, True otherwise. Nothing is committed.
    """
    entity = _find_any(db, model, entity_id)
    if entity is None:
        return False

    entity.is_deleted = True
    entity.deleted_at = utc_now()
    entity.deleted_by = deleted_by
    logger.debug(f"Flagged {model.__name__} {entity_id} as deleted by {deleted_by}")
    return True


def restore(db: Session, model: Type[T], entity_id: int) -> bool:
    """
    Clear the soft delete flag of a row.

    Returns:
        False if no row matches, True otherwise. Nothing is committed.
    """
    entity = _find_any(db, model, entity_id)
    if entity is None:
        return False

    entity.is_deleted = False
    entity.deleted_at = None
    entity.deleted_by = None
    logger.debug(f"Cleared deleted flag on {model.__name__} {entity_id}")
    return True
