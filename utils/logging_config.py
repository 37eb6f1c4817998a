"""
Logging configuration for the FinManager console.
"""

import logging
import os
import sys
from contextvars import ContextVar
from datetime import datetime
from typing import Any, Optional
from uuid import uuid4

# Trace id of the request or CLI command in progress
_current_trace_id: ContextVar[Optional[str]] = ContextVar('finmanager_trace_id', default=None)


class TraceIDLogFormatter(logging.Formatter):
    """Custom formatter that includes trace IDs in log records."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with trace ID."""
        if not hasattr(record, 'trace_id'):
            record.trace_id = get_current_trace_id()
        return super().format(record)


def get_current_trace_id() -> str:
    """Get the trace ID of the unit of work in progress."""
    return _current_trace_id.get() or 'no-trace'


class TraceContext:
    """
    Context manager that tags every log line of one unit of work.

    The web console opens one per request, the CLI one per command.
    """

    def __init__(self, trace_id: Optional[str] = None, label: Optional[str] = None):
        """
        Initialize trace context.

        Args:
            trace_id: Trace ID (will generate if None)
            label: What is being traced, e.g. "GET /invoices"
        """
        self.trace_id = trace_id if trace_id is not None else f"trace-{uuid4().hex[:8]}"
        self.label = label
        self.start_time = datetime.now()
        self.logger = logging.getLogger('finmanager.trace')
        self._token = None

    def __enter__(self) -> 'TraceContext':
        """Enter the trace context."""
        self._token = _current_trace_id.set(self.trace_id)
        self.start_time = datetime.now()

        label_info = f" ({self.label})" if self.label else ""
        self.logger.debug(f"Trace started: {self.trace_id}{label_info}")
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> bool:
        """Exit the trace context."""
        duration = (datetime.now() - self.start_time).total_seconds()

        if exc_type:
            self.logger.error(
                f"Trace {self.trace_id} ended with error after {duration:.3f}s: {exc_val}"
            )
        else:
            self.logger.debug(f"Trace {self.trace_id} completed in {duration:.3f}s")

        if self._token is not None:
            _current_trace_id.reset(self._token)
            self._token = None

        # Don't suppress exceptions
        return False


def configure_logging(log_level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """
    Configure logging for the console.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file (if None, logs to console only)
    """
    if log_level is None:
        log_level = os.environ.get('FINMANAGER_LOG_LEVEL', 'INFO')

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    if log_file is not None:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = TraceIDLogFormatter(
        '%(asctime)s - %(trace_id)s - %(name)s - %(levelname)s - %(message)s'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    configure_logger('finmanager', numeric_level)
    configure_logger('finmanager.api', numeric_level)
    configure_logger('finmanager.console', numeric_level)
    # urllib3 logs full URLs at DEBUG
    configure_logger('urllib3', max(numeric_level, logging.WARNING))

    logging.info("Logging configured with level %s", log_level)


def configure_logger(name: str, level: int) -> None:
    """Configure a specific logger."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = True
