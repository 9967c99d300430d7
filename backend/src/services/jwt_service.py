"""
JWT Service for access token management.

Provides signed bearer token creation and validation. Tokens carry the
username and a unique token id, are signed with the symmetric key from
configuration and are valid for a fixed window after issuance.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from pydantic import BaseModel

from core import config
from core.constants import JWT_ALGORITHM, MIN_JWT_SECRET_BYTES, TOKEN_LIFETIME_HOURS


class TokenPayload(BaseModel):
    """Payload structure for JWT tokens."""
    name: str  # Username
    jti: str  # Unique token id
    iss: Optional[str] = None
    aud: Optional[str] = None
    iat: Optional[int] = None  # Set by JWT service
    exp: Optional[int] = None  # Set by JWT service


class IssuedToken(BaseModel):
    """A freshly minted token and its expiry."""
    token: str
    expiration: datetime


class JWTService:
    """Service for JWT token operations."""

    ALGORITHM = JWT_ALGORITHM
    TOKEN_LIFETIME = timedelta(hours=TOKEN_LIFETIME_HOURS)

    @classmethod
    def validate_secret_key(cls, secret_key: Optional[str] = None) -> str:
        """
        Ensure the signing key is long enough for HS256.

        Raises:
            ValueError: If the key is shorter than 256 bits
        """
        key = cls._get_secret_key() if secret_key is None else secret_key
        if len(key.encode("utf-8")) < MIN_JWT_SECRET_BYTES:
            raise ValueError(
                f"JWT_SECRET_KEY must be at least {MIN_JWT_SECRET_BYTES} bytes ({MIN_JWT_SECRET_BYTES * 8} bits)"
            )
        return key

    @classmethod
    def create_access_token(cls, username: str) -> IssuedToken:
        """Create a signed access token for a user."""
        key = cls.validate_secret_key()
        now = datetime.now(timezone.utc)
        expire = now + cls.TOKEN_LIFETIME
        to_encode = {
            "name": username,
            "jti": str(uuid.uuid4()),
            "iss": config.JWT_VALID_ISSUER,
            "aud": config.JWT_VALID_AUDIENCE,
            "iat": now,
            "exp": expire,
        }
        encoded_jwt = jwt.encode(to_encode, key, algorithm=cls.ALGORITHM)
        # exp is serialized with second precision
        return IssuedToken(token=encoded_jwt, expiration=expire.replace(microsecond=0))

    @classmethod
    def verify_token(cls, token: str) -> Optional[TokenPayload]:
        """Verify signature, expiry, issuer and audience, then decode the token."""
        try:
            payload = jwt.decode(
                token,
                cls._get_secret_key(),
                algorithms=[cls.ALGORITHM],
                issuer=config.JWT_VALID_ISSUER,
                audience=config.JWT_VALID_AUDIENCE,
                options={"require": ["exp", "iat", "name", "jti"]},
                leeway=0,
            )
            return TokenPayload(**payload)
        except jwt.ExpiredSignatureError:
            return None
        except jwt.InvalidTokenError:
            return None

    @classmethod
    def _get_secret_key(cls) -> str:
        """Get the JWT secret key."""
        return config.JWT_SECRET_KEY


# Global instance
jwt_service = JWTService()
