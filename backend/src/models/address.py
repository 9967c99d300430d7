"""
Address model for patient postal addresses.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.constants import MAX_ADDRESS_LINE_LENGTH, MAX_POSTAL_CODE_LENGTH
from models.base import Base, AuditMixin, SoftDeleteMixin


class Address(AuditMixin, SoftDeleteMixin, Base):
    """Postal address referenced by zero or more patients."""

    __tablename__ = "addresses"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    street: Mapped[str] = mapped_column(String(MAX_ADDRESS_LINE_LENGTH), default="")
    city: Mapped[str] = mapped_column(String(MAX_ADDRESS_LINE_LENGTH), default="")
    postal_code: Mapped[str] = mapped_column(String(MAX_POSTAL_CODE_LENGTH), default="")
    country: Mapped[str] = mapped_column(String(MAX_ADDRESS_LINE_LENGTH), default="")

    # Relationships
    # No cascade: patients are not removed with their address
    patients = relationship("Patient", back_populates="address", passive_deletes=True)
    """Patients living at this address."""

    def __repr__(self) -> str:
        return f"<Address(id={self.id}, city='{self.city}', country='{self.country}')>"
