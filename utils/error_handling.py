"""
Error handling framework for the FinManager console.

This module provides:
1. Custom exception hierarchy (form validation, configuration, API failures)
2. Error reporting system with per-code handlers
3. Mapping from HTTP status codes to console errors
"""

import logging
import json
import threading
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Set, Union

from utils.logging_config import get_current_trace_id

# -----------------------------------------------------------------------------
# Exception Hierarchy
# -----------------------------------------------------------------------------

class ErrorSeverity(Enum):
    """Severity levels for errors."""
    LOW = "low"           # Expected, user-correctable (form errors)
    MEDIUM = "medium"     # Request failed, surfaced as a toast
    HIGH = "high"         # Backend or transport failure
    FATAL = "fatal"       # Console cannot start


class FinManagerError(Exception):
    """Base exception for all console errors."""

    def __init__(
        self,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        """Initialize the exception.

        Args:
            message: Human-readable error message
            severity: Error severity level
            error_code: Application-specific error code
            details: Additional error details
            cause: The exception that caused this one
        """
        self.message = message
        self.severity = severity
        self.error_code = error_code or "ERR_UNDEFINED"
        self.details = details or {}
        self.cause = cause
        self.timestamp = datetime.now().isoformat()
        self.trace_id = get_current_trace_id()

        formatted_message = f"{self.error_code}: {message}"
        super().__init__(formatted_message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the exception to a dictionary."""
        result = {
            "error_code": self.error_code,
            "message": self.message,
            "severity": self.severity.value,
            "timestamp": self.timestamp,
            "trace_id": self.trace_id,
        }

        if self.details:
            result["details"] = self.details

        if self.cause:
            result["cause"] = str(self.cause)

        return result

    def to_json(self) -> str:
        """Convert the exception to a JSON string."""
        return json.dumps(self.to_dict(), default=str)


class ConfigurationError(FinManagerError):
    """Error related to console configuration."""

    def __init__(self, message: str, **kwargs: Any):
        kwargs.setdefault("error_code", "ERR_CONFIG")
        kwargs.setdefault("severity", ErrorSeverity.FATAL)
        super().__init__(message, **kwargs)


class ValidationError(FinManagerError):
    """A form failed client-side validation; nothing was sent to the API."""

    def __init__(self, message: str, field_errors: Optional[Dict[str, str]] = None,
                 form_name: Optional[str] = None, **kwargs: Any):
        kwargs.setdefault("error_code", "ERR_VALIDATION")
        kwargs.setdefault("severity", ErrorSeverity.LOW)
        details = kwargs.get("details", {})
        if form_name:
            details["form_name"] = form_name
        kwargs["details"] = details
        self.field_errors: Dict[str, str] = dict(field_errors or {})
        super().__init__(message, **kwargs)


class ApiError(FinManagerError):
    """A request to the backend API failed."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        method: Optional[str] = None,
        path: Optional[str] = None,
        response_body: Any = None,
        **kwargs: Any
    ):
        kwargs.setdefault("error_code", "ERR_API")
        details = kwargs.get("details", {})
        if status_code is not None:
            details["status_code"] = status_code
        if method:
            details["method"] = method
        if path:
            details["path"] = path
        kwargs["details"] = details
        self.status_code = status_code
        self.method = method
        self.path = path
        self.response_body = response_body
        super().__init__(message, **kwargs)


class AuthenticationError(ApiError):
    """The API rejected the bearer token (HTTP 401)."""

    def __init__(self, message: str = "Session expired. Please login again.", **kwargs: Any):
        kwargs.setdefault("error_code", "ERR_AUTH")
        kwargs.setdefault("status_code", 401)
        super().__init__(message, **kwargs)


class AuthorizationError(ApiError):
    """The user lacks permission for the operation (HTTP 403)."""

    def __init__(self, message: str = "You do not have permission to perform this action.",
                 **kwargs: Any):
        kwargs.setdefault("error_code", "ERR_AUTHZ")
        kwargs.setdefault("status_code", 403)
        super().__init__(message, **kwargs)


class ServerError(ApiError):
    """The API answered with a 5xx status."""

    def __init__(self, message: str = "Server error. Please try again later.", **kwargs: Any):
        kwargs.setdefault("error_code", "ERR_SERVER")
        kwargs.setdefault("severity", ErrorSeverity.HIGH)
        super().__init__(message, **kwargs)


class ApiConnectionError(ApiError):
    """The API could not be reached (connection refused, DNS, timeout)."""

    def __init__(self, message: str = "Cannot connect to the server.", **kwargs: Any):
        kwargs.setdefault("error_code", "ERR_CONNECTION")
        kwargs.setdefault("severity", ErrorSeverity.HIGH)
        super().__init__(message, **kwargs)


def error_for_status(
    status_code: int,
    method: str,
    path: str,
    body: Any = None
) -> ApiError:
    """
    Build the console error for a failed HTTP response.

    Args:
        status_code: HTTP status returned by the API
        method: HTTP method of the request
        path: API path of the request
        body: Parsed response body, if any

    Returns:
        ApiError subclass matching the status
    """
    server_message = None
    if isinstance(body, dict):
        server_message = body.get("message") or body.get("detail")
        if isinstance(server_message, list):
            server_message = "; ".join(str(m) for m in server_message)

    common = {"method": method, "path": path, "response_body": body}

    if status_code == 401:
        return AuthenticationError(**common)
    if status_code == 403:
        return AuthorizationError(**common)
    if status_code >= 500:
        return ServerError(status_code=status_code, **common)

    return ApiError(
        server_message or f"Request failed with status {status_code}",
        status_code=status_code,
        **common
    )


# -----------------------------------------------------------------------------
# Error Reporting System
# -----------------------------------------------------------------------------

class ErrorManager:
    """
    Error reporting with per-code handlers.

    The console creates one manager per session so that handlers (clearing the
    session's credentials, queueing its toasts) only touch that session. The
    process-wide instance from get_instance() is used where no session exists.
    """

    _instance: Optional['ErrorManager'] = None
    _lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> 'ErrorManager':
        """Get the process-wide instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    def __init__(self):
        """Initialize the error manager."""
        self.logger = logging.getLogger("finmanager.errors")
        self.error_handlers: Dict[str, List[Callable[[FinManagerError], None]]] = {}
        self.error_counts: Dict[str, int] = {}
        self._subscribers: Set[Callable[[FinManagerError], None]] = set()

    def register_handler(self, error_code: str, handler: Callable[[FinManagerError], None]) -> None:
        """Register a handler for a specific error code."""
        if error_code not in self.error_handlers:
            self.error_handlers[error_code] = []
        self.error_handlers[error_code].append(handler)

    def subscribe(self, handler: Callable[[FinManagerError], None]) -> Callable[[], None]:
        """
        Subscribe to all errors.

        Returns:
            A function that can be called to unsubscribe.
        """
        self._subscribers.add(handler)

        def unsubscribe() -> None:
            self._subscribers.discard(handler)

        return unsubscribe

    def handle_error(self, error: Union[FinManagerError, Exception]) -> FinManagerError:
        """
        Handle an error through the error management system.

        Returns:
            The error, wrapped in FinManagerError if it was a plain exception
        """
        if not isinstance(error, FinManagerError):
            error = FinManagerError(
                str(error),
                severity=ErrorSeverity.HIGH,
                error_code="ERR_UNEXPECTED",
                cause=error
            )

        if error.severity == ErrorSeverity.FATAL:
            self.logger.critical(str(error))
        elif error.severity == ErrorSeverity.HIGH:
            self.logger.error(str(error))
        elif error.severity == ErrorSeverity.MEDIUM:
            self.logger.warning(str(error))
        else:
            self.logger.info(str(error))

        self.error_counts[error.error_code] = self.error_counts.get(error.error_code, 0) + 1

        for handler in self.error_handlers.get(error.error_code, []):
            try:
                handler(error)
            except Exception as e:
                self.logger.error(f"Error in error handler: {e}")

        for subscriber in list(self._subscribers):
            try:
                subscriber(error)
            except Exception as e:
                self.logger.error(f"Error in error subscriber: {e}")

        return error
