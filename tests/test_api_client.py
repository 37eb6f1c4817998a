"""
Unit tests for the API client and the session's response interceptors.
"""

import unittest
from typing import Any
from unittest.mock import MagicMock

import requests

from api.client import ApiClient, clean_params
from api.interceptors import install_response_interceptors
from api.query_cache import QueryCache
from stores.auth_store import AuthStore
from stores.session_store import SessionState
from utils.error_handling import (
    ApiConnectionError,
    ApiError,
    AuthenticationError,
    AuthorizationError,
    ErrorManager,
    ServerError,
)
from utils.notifications import NotificationCenter, NotificationType


def fake_response(status_code: int = 200, body: Any = None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.content = b"" if body is None else b"{}"
    response.json.return_value = body
    response.text = str(body)
    return response


class TestCleanParams(unittest.TestCase):

    def test_empty_values_are_dropped(self):
        params = clean_params({"search": "", "status": None, "subsidiaryId": "3", "page": 1, "ids": []})

        self.assertEqual(params, {"subsidiaryId": "3", "page": 1})

    def test_booleans_and_lists(self):
        params = clean_params({"isActive": False, "dateRange": ["2025-01-01T00:00:00.000Z", None]})

        self.assertEqual(params, {"isActive": "false", "dateRange": ["2025-01-01T00:00:00.000Z"]})


class TestApiClient(unittest.TestCase):

    def setUp(self):
        self.http = MagicMock()
        self.http.headers = {}
        self.error_manager = ErrorManager()
        self.token = "abc123"
        self.client = ApiClient(
            base_url="http://api.test/api/",
            timeout=5,
            token_provider=lambda: self.token,
            error_manager=self.error_manager,
            session=self.http,
        )

    def test_json_headers(self):
        self.assertEqual(self.http.headers["Content-Type"], "application/json")
        self.assertEqual(self.http.headers["Accept"], "application/json")

    def test_get_sends_bearer_token(self):
        self.http.request.return_value = fake_response(200, {"data": [], "total": 0})

        body = self.client.get("/employees", params={"page": 1, "search": ""})

        self.assertEqual(body, {"data": [], "total": 0})
        self.http.request.assert_called_once_with(
            "GET",
            "http://api.test/api/employees",
            params={"page": 1},
            json=None,
            headers={"Authorization": "Bearer abc123"},
            timeout=5,
        )

    def test_no_token_no_authorization_header(self):
        self.token = None
        self.http.request.return_value = fake_response(200, {})

        self.client.post("/auth/login", json={"username": "admin"})

        self.assertEqual(self.http.request.call_args.kwargs["headers"], {})

    def test_empty_response(self):
        self.http.request.return_value = fake_response(204)

        self.assertIsNone(self.client.delete("/employees/1"))

    def test_error_statuses_raise_and_are_reported(self):
        reported = []
        self.error_manager.subscribe(reported.append)
        cases = [
            (401, AuthenticationError),
            (403, AuthorizationError),
            (500, ServerError),
            (422, ApiError),
        ]
        for status, expected in cases:
            self.http.request.return_value = fake_response(status, {"message": "nope"})
            with self.assertRaises(expected):
                self.client.get("/invoices")

        self.assertEqual(len(reported), len(cases))

    def test_connection_error(self):
        self.http.request.side_effect = requests.exceptions.ConnectionError("refused")

        with self.assertRaises(ApiConnectionError) as ctx:
            self.client.get("/dashboard/stats")

        self.assertEqual(ctx.exception.path, "/dashboard/stats")

    def test_from_config(self):
        client = ApiClient.from_config({"api": {"base_url": "http://other/api", "timeout_seconds": 9}},
                                       session=self.http)

        self.assertEqual(client.url_for("payouts"), "http://other/api/payouts")
        self.assertEqual(client.timeout, 9)


class TestResponseInterceptors(unittest.TestCase):

    def setUp(self):
        self.session = SessionState()
        self.auth_store = AuthStore(self.session)
        self.auth_store.login({"id": "1", "username": "admin"}, "token-1")
        self.notifications = NotificationCenter(self.session)
        self.error_manager = ErrorManager()
        self.cache = QueryCache()
        self.cache.set(("invoices", ()), ["cached"])
        install_response_interceptors(self.error_manager, self.auth_store, self.notifications, self.cache)

    def test_unauthenticated_clears_credentials_and_cache(self):
        self.error_manager.handle_error(AuthenticationError())

        self.assertFalse(self.auth_store.is_authenticated)
        self.assertIsNone(self.auth_store.token)
        self.assertEqual(len(self.cache), 0)
        toasts = self.notifications.drain()
        self.assertEqual(len(toasts), 1)
        self.assertEqual(toasts[0].title, "Session expired. Please login again.")
        self.assertEqual(toasts[0].type, NotificationType.ERROR)

    def test_forbidden_and_server_errors_notify_only(self):
        self.error_manager.handle_error(AuthorizationError())
        self.error_manager.handle_error(ServerError())

        self.assertTrue(self.auth_store.is_authenticated)
        self.assertEqual(len(self.cache), 1)
        titles = [n.title for n in self.notifications.drain()]
        self.assertEqual(titles, ["You do not have permission to perform this action.",
                                  "Server error. Please try again later."])

    def test_other_errors_are_left_to_the_page(self):
        self.error_manager.handle_error(ApiError("Invoice number already used", status_code=409))

        self.assertEqual(self.notifications.pending(), [])


if __name__ == "__main__":
    unittest.main()
