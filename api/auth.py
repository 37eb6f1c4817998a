"""
Authentication against the backend, with a mocked login for development.
"""

import logging
from typing import Tuple

from api.base_service import parse_response
from api.client import ApiClient
from api.query_cache import QueryCache
from models.entities import User
from stores.auth_store import AuthStore
from utils.error_handling import ApiError

logger = logging.getLogger(__name__)

MOCK_TOKEN = "mock-jwt-token-12345"
MOCK_EMAIL = "admin@example.com"


class AuthService:
    """
    Sign in and out, keeping the session's AuthStore in step.

    With mock_login enabled any username/password pair is accepted and no
    request is made; the backend login endpoint is not wired yet.
    """

    def __init__(self, client: ApiClient, cache: QueryCache, auth_store: AuthStore,
                 mock_login: bool = True):
        self.client = client
        self.cache = cache
        self.auth_store = auth_store
        self.mock_login = mock_login

    def login(self, username: str, password: str) -> Tuple[User, str]:
        """
        Sign in and store the credentials.

        Returns:
            The signed-in user and the bearer token

        Raises:
            ApiError: the backend rejected the credentials
        """
        if self.mock_login:
            user = User(id="1", username=username, email=MOCK_EMAIL)
            token = MOCK_TOKEN
            logger.info(f"Mock login for {username}")
        else:
            data = self.client.post("/auth/login", json={"username": username, "password": password}) or {}
            user = parse_response(User, data.get("user") or {"id": "", "username": username},
                                  "POST", "/auth/login")
            token = data.get("access_token") or ""
            if not token:
                raise ApiError("Login failed", status_code=None, method="POST", path="/auth/login",
                               response_body=data)

        self.cache.invalidate_all()
        self.auth_store.login(user.model_dump(), token)
        return user, token

    def logout(self) -> None:
        """Sign out. Transport errors are logged and ignored; credentials are always cleared."""
        try:
            if not self.mock_login and self.auth_store.token:
                self.client.post("/auth/logout")
        except ApiError as e:
            logger.warning(f"Ignoring logout error: {e}")
        finally:
            self.auth_store.logout()
            self.cache.invalidate_all()
