"""
REST API client for the FinManager backend.

A thin layer over requests.Session: it adds the bearer token, maps failed
responses to console errors and reports them through the session's
ErrorManager. It never retries.
"""

import logging
import os
import time
from typing import Any, Callable, Dict, Mapping, Optional

import requests

from utils.error_handling import (
    ApiConnectionError,
    ApiError,
    ErrorManager,
    error_for_status,
)

logger = logging.getLogger("finmanager.api")

DEFAULT_BASE_URL = "http://localhost:3001/api"
DEFAULT_TIMEOUT_SECONDS = 30

TokenProvider = Callable[[], Optional[str]]


def clean_params(params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Drop empty query parameters and encode the rest the way the API expects.

    None, empty strings and empty lists are not sent; booleans become
    "true"/"false"; lists are sent as repeated parameters.
    """
    cleaned: Dict[str, Any] = {}
    for key, value in (params or {}).items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            cleaned[key] = "true" if value else "false"
        elif isinstance(value, (list, tuple)):
            items = [str(v) for v in value if v not in (None, "")]
            if items:
                cleaned[key] = items
        else:
            cleaned[key] = value
    return cleaned


class ApiClient:
    """HTTP client shared by all resource services of one console session."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        token_provider: Optional[TokenProvider] = None,
        error_manager: Optional[ErrorManager] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: API root; defaults to FINMANAGER_API_URL or the local backend
            timeout: Request timeout in seconds
            token_provider: Returns the current bearer token, if any
            error_manager: Receives every failed request before it is raised
            session: requests session to reuse (tests pass a mock)
        """
        self.base_url = (base_url or os.environ.get("FINMANAGER_API_URL") or DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout
        self.token_provider = token_provider or (lambda: None)
        self.error_manager = error_manager or ErrorManager.get_instance()
        self.session = session or requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })

    @classmethod
    def from_config(cls, config: Dict[str, Any], **kwargs: Any) -> 'ApiClient':
        """Build a client from the `api` configuration section."""
        api_config = config.get("api", {})
        return cls(
            base_url=api_config.get("base_url"),
            timeout=api_config.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS),
            **kwargs
        )

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _headers(self) -> Dict[str, str]:
        token = self.token_provider()
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        """
        Send one request and return the decoded JSON body.

        Returns:
            Parsed JSON, or None for an empty response

        Raises:
            ApiError: the API answered with an error status (subclass by status)
            ApiConnectionError: the API could not be reached
        """
        method = method.upper()
        started = time.monotonic()
        try:
            response = self.session.request(
                method,
                self.url_for(path),
                params=clean_params(params),
                json=json,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            error = ApiConnectionError(method=method, path=path, cause=e)
            self.error_manager.handle_error(error)
            raise error from e

        elapsed_ms = (time.monotonic() - started) * 1000
        logger.info(f"{method} {path} -> {response.status_code} ({elapsed_ms:.0f}ms)")

        body = self._decode(response)
        if not response.ok:
            error = error_for_status(response.status_code, method, path, body)
            self.error_manager.handle_error(error)
            raise error

        return body

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Any = None) -> Any:
        return self.request("POST", path, json=json)

    def patch(self, path: str, json: Any = None) -> Any:
        return self.request("PATCH", path, json=json)

    def put(self, path: str, json: Any = None) -> Any:
        return self.request("PUT", path, json=json)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    def close(self) -> None:
        self.session.close()


__all__ = ["ApiClient", "ApiError", "clean_params", "DEFAULT_BASE_URL"]
