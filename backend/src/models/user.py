"""
User model for API identities.

Users authenticate with a username and password and receive a bearer
token. Passwords are stored as bcrypt hashes only.
"""

from typing import Optional
from datetime import datetime
from sqlalchemy import String, TIMESTAMP, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from core.constants import MAX_USERNAME_LENGTH
from core.database import Base


class User(Base):
    """Identity allowed to call the patient API."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    username: Mapped[str] = mapped_column(String(MAX_USERNAME_LENGTH))
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255))

    # Metadata
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)
    last_login_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint('username', name='uq_users_username'),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
