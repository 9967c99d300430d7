# pyright: reportMissingTypeStubs=false
"""
Authentication API endpoints.

Exchanges a username and password for a signed bearer token.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from api.responses import LoginResponse
from core.database import get_db
from services.auth_service import AuthService
from services.jwt_service import jwt_service

logger = logging.getLogger(__name__)

router = APIRouter()


class LoginRequest(BaseModel):
    """Request model for login. Empty fields are rejected with 400, not 422."""
    username: Optional[str] = None
    password: Optional[str] = None


# Plain def: password hashing runs in the threadpool
@router.post(
    "/login",
    summary="Log in",
    description="Validate credentials and issue a bearer token valid for 3 hours",
    response_model=LoginResponse,
)
def login(
    request: LoginRequest,
    db: Session = Depends(get_db),
) -> LoginResponse:
    """Authenticate a user and return a signed token and its expiry."""
    username = (request.username or "").strip()
    if not username or not request.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username and password are required"
        )

    logger.info(f"Login attempt for user: {username}")

    user = AuthService.authenticate(db, username, request.password)
    if user is None:
        logger.warning(f"Authentication failed for user: {username}")
        # Same response for unknown user and wrong password
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password"
        )

    issued = jwt_service.create_access_token(user.username)
    logger.info(f"User {username} authenticated successfully, token expires at {issued.expiration.isoformat()}")
    return LoginResponse(token=issued.token, expiration=issued.expiration)
