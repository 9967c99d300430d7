"""
Login/logout against the gateway.
"""

import logging
from datetime import datetime
from typing import Optional

import httpx

from client.session import ApiSession

logger = logging.getLogger(__name__)


class AuthClient:
    """Obtains bearer tokens and wraps them in ApiSession objects."""

    LOGIN_PATH = "/auth/login"

    def __init__(self, http_client: httpx.Client):
        self._http = http_client

    def login(self, username: str, password: str) -> Optional[ApiSession]:
        """
        Exchange credentials for a session.

        Returns:
            A new ApiSession, or None if the credentials are rejected or the
            service cannot be reached
        """
        try:
            response = self._http.post(self.LOGIN_PATH, json={"username": username, "password": password})
        except httpx.HTTPError as e:
            logger.error(f"Login request failed: {e}")
            return None

        if not response.is_success:
            logger.warning(f"Login rejected for {username} [{response.status_code}]")
            return None

        body = response.json()
        token = body.get("token")
        if not token:
            logger.error("Login response did not contain a token")
            return None

        expiration = body.get("expiration")
        return ApiSession(
            token=token,
            expiration=datetime.fromisoformat(expiration) if expiration else None,
            username=username,
        )

    def logout(self, session: ApiSession) -> None:
        """Discard the session's token. Tokens are stateless; nothing is sent."""
        session.clear()
