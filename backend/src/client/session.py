"""
Per-user API session.

Holds the bearer token obtained at login. Each user of a frontend keeps
its own ApiSession and passes it to every client call; nothing is stored
at module level.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional


@dataclass
class ApiSession:
    """Bearer token and expiry for one logged-in user."""
    token: Optional[str] = None
    expiration: Optional[datetime] = None
    username: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        """True while a token is held and has not expired."""
        if not self.token:
            return False
        if self.expiration is None:
            return True
        expiration = self.expiration
        if expiration.tzinfo is None:
            expiration = expiration.replace(tzinfo=timezone.utc)
        return datetime.now(timezone.utc) < expiration

    def auth_headers(self) -> Dict[str, str]:
        """Authorization header for outgoing requests (empty when logged out)."""
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def clear(self) -> None:
        """Forget the token (logout)."""
        self.token = None
        self.expiration = None
        self.username = None
