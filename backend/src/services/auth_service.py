"""
Authentication service: password hashing and credential checks.

Passwords are hashed with bcrypt. The password is first reduced with
SHA-256 so inputs beyond bcrypt's 72-byte limit are still fully significant.
"""

import base64
import hashlib
import logging
from typing import Optional

import bcrypt
from sqlalchemy.orm import Session

from core import config
from models import User
from utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)


def _prehash(password: str) -> bytes:
    # base64 keeps the digest free of NUL bytes, which bcrypt rejects
    return base64.b64encode(hashlib.sha256(password.encode('utf-8')).digest())


class AuthService:
    """Service class for identity store operations."""

    @staticmethod
    def hash_password(password: str) -> str:
        """Create a bcrypt hash of a password."""
        return bcrypt.hashpw(_prehash(password), bcrypt.gensalt()).decode('utf-8')

    @staticmethod
    def verify_password(password: str, password_hash: str) -> bool:
        """Verify a password against its stored hash."""
        try:
            return bcrypt.checkpw(_prehash(password), password_hash.encode('utf-8'))
        except ValueError:
            # Malformed hash in storage
            return False

    @staticmethod
    def get_user_by_username(db: Session, username: str) -> Optional[User]:
        """Look up a user by exact username."""
        return db.query(User).filter(User.username == username).first()

    @staticmethod
    def authenticate(db: Session, username: str, password: str) -> Optional[User]:
        """
        Check credentials.

        Returns:
            The user when the username exists and the password matches,
            otherwise None. Callers must not distinguish the two failures.
        """
        user = AuthService.get_user_by_username(db, username)
        if user is None:
            # Hash anyway so unknown users cost the same time as wrong passwords
            AuthService.verify_password(password, _DUMMY_HASH)
            return None
        if not AuthService.verify_password(password, user.password_hash):
            return None

        user.last_login_at = utc_now()
        db.commit()
        return user

    @staticmethod
    def create_user(db: Session, username: str, password: str, email: Optional[str] = None) -> User:
        """Create a user with a hashed password and commit it."""
        user = User(
            username=username,
            email=email,
            password_hash=AuthService.hash_password(password),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info(f"Created user {user.id} ({username})")
        return user

    @staticmethod
    def ensure_admin_user(db: Session) -> User:
        """Create the configured administrator account if it does not exist yet."""
        existing = AuthService.get_user_by_username(db, config.ADMIN_USERNAME)
        if existing is not None:
            return existing

        logger.info(f"Seeding administrator account '{config.ADMIN_USERNAME}'")
        return AuthService.create_user(
            db,
            username=config.ADMIN_USERNAME,
            password=config.ADMIN_PASSWORD,
            email=config.ADMIN_EMAIL,
        )


_DUMMY_HASH = AuthService.hash_password("unused-dummy-password")
