"""
Request dependencies for console routes.
"""

from typing import Any, Dict, Optional
from urllib.parse import urlparse

from fastapi import Depends, Request

from api.services import ConsoleServices
from forms.filters import ListFilters


class LoginRequired(Exception):
    """The page needs a signed-in user; the app redirects to /login."""

    def __init__(self, next_path: Optional[str] = None):
        self.next_path = next_path
        super().__init__("Login required")


def get_services(request: Request) -> ConsoleServices:
    """Services of the current session, attached by the session middleware."""
    return request.state.services


def require_auth(request: Request, services: ConsoleServices = Depends(get_services)) -> ConsoleServices:
    if not services.auth_store.is_authenticated:
        raise LoginRequired(request.url.path)
    return services


def safe_back_path(request: Request, default: str = "/dashboard") -> str:
    """
    Path to return to after a header action.

    Only same-site paths from the Referer header are used.
    """
    referer = request.headers.get("referer")
    if not referer:
        return default
    parsed = urlparse(referer)
    if parsed.netloc and parsed.netloc != request.url.netloc:
        return default
    path = parsed.path or default
    if not path.startswith("/") or path.startswith("//"):
        return default
    return f"{path}?{parsed.query}" if parsed.query else path


async def read_form(request: Request) -> Dict[str, Any]:
    """Submitted form fields; a field submitted more than once becomes a list."""
    form = await request.form()
    values: Dict[str, Any] = {}
    for key in form.keys():
        items = [v for v in form.getlist(key) if isinstance(v, str)]
        values[key] = items if len(items) > 1 else (items[0] if items else "")
    return values


def list_filters(request: Request, services: ConsoleServices = Depends(require_auth)) -> ListFilters:
    """
    Filters of a list page from its query string.

    Without an explicit subsidiary filter the header's selection applies.
    """
    query: Dict[str, Any] = dict(request.query_params)
    if "subsidiary" not in query:
        selected = services.ui_store.subsidiary_filter()
        if selected:
            query["subsidiary"] = selected
    return ListFilters.from_query(query)
