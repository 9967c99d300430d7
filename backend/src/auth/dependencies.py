# pyright: reportMissingTypeStubs=false
"""
Authentication dependencies for FastAPI.

Verifies bearer tokens before a handler runs and injects the verified
identity into the request, both as a UserContext and as the audit actor
bound to the request's database session.
"""

import logging
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from core.database import get_db, set_session_actor
from services.jwt_service import jwt_service, TokenPayload

logger = logging.getLogger(__name__)


class UserContext:
    """Authenticated user context extracted from JWT token."""

    def __init__(self, username: str, token_id: str):
        self.username = username
        self.token_id = token_id

    def __repr__(self) -> str:
        return f"UserContext(username='{self.username}', token_id='{self.token_id}')"


# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


def get_token_payload(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[TokenPayload]:
    """Extract and validate JWT token payload."""
    if not credentials:
        return None

    return jwt_service.verify_token(credentials.credentials)


def get_current_user(
    payload: Optional[TokenPayload] = Depends(get_token_payload),
) -> UserContext:
    """Get authenticated user context from JWT token."""
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication credentials not provided or invalid",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return UserContext(username=payload.name, token_id=payload.jti)


def get_audited_db(
    current_user: UserContext = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Session:
    """
    Database session whose writes are attributed to the authenticated user.

    Audit stamping (created_by / last_modified_by) reads the actor bound here.
    """
    set_session_actor(db, current_user.username)
    return db
