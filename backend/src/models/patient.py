"""
Patient model representing individuals whose records are managed by the service.

Each patient can optionally reference one postal address. The address is
owned independently: deleting a patient never deletes its address.
"""

from datetime import date
from typing import Optional

from sqlalchemy import String, ForeignKey, Date, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.constants import MAX_NAME_LENGTH, MAX_GENDER_LENGTH, MAX_PHONE_LENGTH
from models.base import Base, AuditMixin, SoftDeleteMixin


class Patient(AuditMixin, SoftDeleteMixin, Base):
    """
    Patient entity.

    Created on registration, mutated on update/restore. Never physically
    removed except through an explicit hard delete.
    """

    __tablename__ = "patients"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    """Unique identifier for the patient."""

    first_name: Mapped[str] = mapped_column(String(MAX_NAME_LENGTH))
    last_name: Mapped[str] = mapped_column(String(MAX_NAME_LENGTH))

    date_of_birth: Mapped[date] = mapped_column(Date)

    gender: Mapped[str] = mapped_column(String(MAX_GENDER_LENGTH))

    phone_number: Mapped[Optional[str]] = mapped_column(String(MAX_PHONE_LENGTH), nullable=True)
    """Contact phone number for the patient."""

    address_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("addresses.id", ondelete="SET NULL"), nullable=True
    )
    """Optional reference to the patient's postal address."""

    # Relationships
    address = relationship("Address", back_populates="patients")
    """Optional relationship to the Address entity."""

    __table_args__ = (
        Index('idx_patients_address', 'address_id'),
        Index('idx_patients_is_deleted', 'is_deleted'),
    )

    def __repr__(self) -> str:
        return f"<Patient(id={self.id}, name='{self.first_name} {self.last_name}', is_deleted={self.is_deleted})>"
