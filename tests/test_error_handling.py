"""
Unit tests for the error handling framework.
"""

import json
import unittest
from unittest.mock import MagicMock

from utils.error_handling import (
    ApiError,
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ErrorManager,
    ErrorSeverity,
    FinManagerError,
    ServerError,
    ValidationError,
    error_for_status,
)


class TestErrorHierarchy(unittest.TestCase):
    """Test the custom exception classes."""

    def test_base_error(self):
        error = FinManagerError("Something broke", details={"step": 2})

        self.assertEqual(str(error), "ERR_UNDEFINED: Something broke")
        self.assertEqual(error.severity, ErrorSeverity.MEDIUM)

        data = json.loads(error.to_json())
        self.assertEqual(data["message"], "Something broke")
        self.assertEqual(data["details"], {"step": 2})
        self.assertEqual(data["severity"], "medium")

    def test_configuration_error_is_fatal(self):
        error = ConfigurationError("api.base_url missing")

        self.assertEqual(error.error_code, "ERR_CONFIG")
        self.assertEqual(error.severity, ErrorSeverity.FATAL)

    def test_validation_error_keeps_field_errors(self):
        error = ValidationError("Invalid employee", field_errors={"salary": "Salary is required"},
                                form_name="employee")

        self.assertEqual(error.field_errors, {"salary": "Salary is required"})
        self.assertEqual(error.details["form_name"], "employee")
        self.assertEqual(error.severity, ErrorSeverity.LOW)

    def test_api_error_details(self):
        error = ApiError("Bad request", status_code=400, method="POST", path="/invoices")

        self.assertEqual(error.details, {"status_code": 400, "method": "POST", "path": "/invoices"})
        self.assertEqual(error.error_code, "ERR_API")


class TestErrorForStatus(unittest.TestCase):

    def test_status_mapping(self):
        self.assertIsInstance(error_for_status(401, "GET", "/employees"), AuthenticationError)
        self.assertIsInstance(error_for_status(403, "DELETE", "/subsidiaries/1"), AuthorizationError)

        server = error_for_status(502, "GET", "/payouts")
        self.assertIsInstance(server, ServerError)
        self.assertEqual(server.status_code, 502)

    def test_auth_error_message(self):
        error = error_for_status(401, "GET", "/employees")

        self.assertEqual(error.message, "Session expired. Please login again.")
        self.assertEqual(error.status_code, 401)

    def test_server_message_is_used(self):
        error = error_for_status(400, "POST", "/invoices", {"message": ["dueDate must be a date", "bad"]})
        self.assertEqual(error.message, "dueDate must be a date; bad")

        error = error_for_status(409, "POST", "/employees", {"detail": "Email already exists"})
        self.assertEqual(error.message, "Email already exists")

    def test_fallback_message(self):
        error = error_for_status(404, "GET", "/invoices/9", "Not Found")

        self.assertEqual(error.message, "Request failed with status 404")
        self.assertEqual(error.response_body, "Not Found")


class TestErrorManager(unittest.TestCase):

    def setUp(self):
        self.manager = ErrorManager()

    def test_handlers_run_for_their_code(self):
        on_auth = MagicMock()
        on_server = MagicMock()
        self.manager.register_handler("ERR_AUTH", on_auth)
        self.manager.register_handler("ERR_SERVER", on_server)

        error = AuthenticationError()
        self.manager.handle_error(error)

        on_auth.assert_called_once_with(error)
        on_server.assert_not_called()
        self.assertEqual(self.manager.error_counts, {"ERR_AUTH": 1})

    def test_plain_exceptions_are_wrapped(self):
        wrapped = self.manager.handle_error(RuntimeError("boom"))

        self.assertEqual(wrapped.error_code, "ERR_UNEXPECTED")
        self.assertIsInstance(wrapped.cause, RuntimeError)

    def test_failing_handler_does_not_stop_others(self):
        second = MagicMock()
        self.manager.register_handler("ERR_API", MagicMock(side_effect=RuntimeError("handler bug")))
        self.manager.register_handler("ERR_API", second)

        self.manager.handle_error(ApiError("Bad request"))

        second.assert_called_once()

    def test_subscribe_and_unsubscribe(self):
        subscriber = MagicMock()
        unsubscribe = self.manager.subscribe(subscriber)

        self.manager.handle_error(ApiError("first"))
        unsubscribe()
        self.manager.handle_error(ApiError("second"))

        self.assertEqual(subscriber.call_count, 1)

    def test_get_instance_is_shared(self):
        self.assertIs(ErrorManager.get_instance(), ErrorManager.get_instance())


if __name__ == "__main__":
    unittest.main()
