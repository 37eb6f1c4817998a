"""
Per-session wiring of stores, API client, cache and resource services.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from api.auth import AuthService
from api.client import ApiClient
from api.dashboard import DashboardService
from api.employees import EmployeeService
from api.expenses import ExpenseService
from api.interceptors import install_response_interceptors
from api.invoices import InvoiceService
from api.notification_templates import NotificationTemplateService
from api.payouts import PayoutService
from api.profile import ProfileService
from api.query_cache import QueryCache
from api.subsidiaries import SubsidiaryService
from stores.auth_store import AuthStore
from stores.session_store import SessionState
from stores.theme_store import ThemeStore
from stores.ui_store import UIStore
from utils.error_handling import ErrorManager
from utils.notifications import NotificationCenter

logger = logging.getLogger(__name__)


@dataclass
class ConsoleServices:
    """Everything a page or CLI command needs for one session."""
    session: SessionState
    error_manager: ErrorManager
    notifications: NotificationCenter
    auth_store: AuthStore
    ui_store: UIStore
    theme_store: ThemeStore
    client: ApiClient
    cache: QueryCache
    auth: AuthService
    employees: EmployeeService
    invoices: InvoiceService
    expenses: ExpenseService
    payouts: PayoutService
    subsidiaries: SubsidiaryService
    dashboard: DashboardService
    templates: NotificationTemplateService
    profile: ProfileService

    def refresh(self) -> None:
        """Drop all cached server data (the header's refresh button)."""
        self.cache.invalidate_all()


def build_services(
    config: Dict[str, Any],
    session: SessionState,
    cache: Optional[QueryCache] = None,
    http_session: Optional[requests.Session] = None,
) -> ConsoleServices:
    """
    Assemble the services for one console session.

    Args:
        config: Console configuration
        session: Session whose stores back authentication and preferences
        cache: The session's query cache (a new one when None)
        http_session: requests session for the API client (tests pass a mock)

    Returns:
        ConsoleServices bound to the session
    """
    error_manager = ErrorManager()
    notifications = NotificationCenter(session)
    auth_store = AuthStore(session)
    if cache is None:
        cache = QueryCache(stale_seconds=config.get("cache", {}).get("stale_seconds", 30))
    install_response_interceptors(error_manager, auth_store, notifications, cache)

    client = ApiClient.from_config(
        config,
        token_provider=lambda: auth_store.token,
        error_manager=error_manager,
        session=http_session,
    )

    return ConsoleServices(
        session=session,
        error_manager=error_manager,
        notifications=notifications,
        auth_store=auth_store,
        ui_store=UIStore(session),
        theme_store=ThemeStore(session),
        client=client,
        cache=cache,
        auth=AuthService(client, cache, auth_store,
                         mock_login=bool(config.get("auth", {}).get("mock_login", True))),
        employees=EmployeeService(client, cache),
        invoices=InvoiceService(client, cache),
        expenses=ExpenseService(client, cache),
        payouts=PayoutService(client, cache),
        subsidiaries=SubsidiaryService(client, cache),
        dashboard=DashboardService(client, cache),
        templates=NotificationTemplateService(session),
        profile=ProfileService(session, auth_store),
    )
