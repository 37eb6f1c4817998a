"""
Session-level reactions to failed API calls.

Registered on the session's ErrorManager, so the client only raises and each
surface (web console, CLI) decides how to present the queued notifications.
"""

import logging
from typing import Callable, List

from api.query_cache import QueryCache
from stores.auth_store import AuthStore
from utils.error_handling import ErrorManager, FinManagerError
from utils.notifications import NotificationCenter

logger = logging.getLogger(__name__)


def install_response_interceptors(
    error_manager: ErrorManager,
    auth_store: AuthStore,
    notifications: NotificationCenter,
    cache: QueryCache,
) -> List[Callable[[FinManagerError], None]]:
    """
    Wire the 401/403/5xx behaviour for one session.

    401 clears the stored credentials and the cached server data; 401, 403
    and 5xx each queue an error notification with the error's message.
    Other failures are left to the page that made the call.

    Returns:
        The handlers that were registered
    """

    def on_unauthenticated(error: FinManagerError) -> None:
        auth_store.logout()
        cache.invalidate_all()
        notifications.error(error.message)
        logger.info("Credentials cleared after 401")

    def on_forbidden(error: FinManagerError) -> None:
        notifications.error(error.message)

    def on_server_error(error: FinManagerError) -> None:
        notifications.error(error.message)

    error_manager.register_handler("ERR_AUTH", on_unauthenticated)
    error_manager.register_handler("ERR_AUTHZ", on_forbidden)
    error_manager.register_handler("ERR_SERVER", on_server_error)
    return [on_unauthenticated, on_forbidden, on_server_error]
