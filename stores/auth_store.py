"""
Authentication state: the signed-in user and the API bearer token.
"""

import logging
from typing import Any, Dict, Optional

from stores.base_store import PersistedStore

logger = logging.getLogger(__name__)


class AuthStore(PersistedStore):
    """Persisted under "auth-storage"."""

    name = "auth-storage"
    defaults: Dict[str, Any] = {
        "user": None,
        "token": None,
        "is_authenticated": False,
    }

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        return self._get("user")

    @property
    def token(self) -> Optional[str]:
        return self._get("token")

    @property
    def is_authenticated(self) -> bool:
        return bool(self._get("is_authenticated") and self._get("token"))

    @property
    def username(self) -> str:
        user = self.user or {}
        return user.get("username") or "Admin"

    def login(self, user: Dict[str, Any], token: str) -> None:
        """Store the user and token returned by the login endpoint."""
        self._set(user=user, token=token, is_authenticated=True)
        logger.info(f"Signed in as {user.get('username', 'unknown')}")

    def logout(self) -> None:
        """Clear stored credentials."""
        if self.is_authenticated:
            logger.info(f"Signed out {self.username}")
        self._set(user=None, token=None, is_authenticated=False)
