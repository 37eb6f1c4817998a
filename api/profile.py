"""
User profile and password.

No backend endpoint yet; the profile is kept in the console session and
password changes are accepted without being stored.
"""

import logging
from typing import Any, Dict

from models.entities import UserProfile
from stores.auth_store import AuthStore
from stores.session_store import SessionState

logger = logging.getLogger(__name__)

_SESSION_KEY = "profile"


class ProfileService:

    def __init__(self, session: SessionState, auth_store: AuthStore):
        self.session = session
        self.auth_store = auth_store

    def get(self) -> UserProfile:
        stored = self.session.get(_SESSION_KEY)
        if stored:
            return UserProfile.model_validate(stored)
        user = self.auth_store.user or {}
        defaults: Dict[str, Any] = {}
        if user.get("username"):
            defaults["username"] = user["username"]
        return UserProfile(**defaults)

    def update_profile(self, values: Dict[str, Any]) -> UserProfile:
        """Save the profile form's values."""
        profile = self.get().model_copy(update={k: v for k, v in values.items() if v is not None})
        self.session.set(_SESSION_KEY, profile.model_dump())
        logger.info(f"Profile updated for {profile.username}")
        return profile

    def change_password(self, current_password: str, new_password: str) -> None:
        # Passwords are never logged or persisted
        logger.info(f"Password change requested for {self.get().username}")
