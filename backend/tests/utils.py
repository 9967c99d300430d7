"""
Test utilities for patient records tests.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from core import config
from core.constants import JWT_ALGORITHM


def create_access_token(
    username: str,
    expires_delta: timedelta = timedelta(hours=1),
    issuer: Optional[str] = None,
    audience: Optional[str] = None,
    secret_key: Optional[str] = None,
) -> str:
    """Create a bearer token, optionally with a wrong issuer, audience, key or expiry."""
    now = datetime.now(timezone.utc)
    payload = {
        "name": username,
        "jti": str(uuid.uuid4()),
        "iss": issuer or config.JWT_VALID_ISSUER,
        "aud": audience or config.JWT_VALID_AUDIENCE,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, secret_key or config.JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)
