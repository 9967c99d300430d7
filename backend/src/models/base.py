"""
Database base models and shared column mixins.

This module re-exports the declarative Base and provides the audit and
soft-delete column sets shared by the patient-record entities.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import String, TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from core.constants import MAX_ACTOR_LENGTH
from core.database import Base  # type: ignore[reportUnusedImport]


class AuditMixin:
    """
    Columns stamped automatically on every flush.

    created_* is written once on insert; last_modified_* on each update.
    See the mapper event listeners in core.database.
    """

    # active_history keeps the stored value in history so updates can restore it
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False, active_history=True)
    """Timestamp when the row was first created."""

    created_by: Mapped[Optional[str]] = mapped_column(String(MAX_ACTOR_LENGTH), nullable=True, active_history=True)
    """Identity that created the row ("System" for unauthenticated writes)."""

    last_modified_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    """Timestamp of the most recent update."""

    last_modified_by: Mapped[Optional[str]] = mapped_column(String(MAX_ACTOR_LENGTH), nullable=True)
    """Identity that performed the most recent update."""


class SoftDeleteMixin:
    """
    Soft delete support.

    Rows are flagged rather than removed. Queries must opt in to seeing
    flagged rows, see utils.soft_delete.
    """

    is_deleted: Mapped[bool] = mapped_column(default=False, nullable=False)
    """Soft delete flag. True if this row has been deleted."""

    deleted_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    """Timestamp when the row was soft deleted (if applicable)."""

    deleted_by: Mapped[Optional[str]] = mapped_column(String(MAX_ACTOR_LENGTH), nullable=True)
    """Identity that soft deleted the row (if applicable)."""
