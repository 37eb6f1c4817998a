"""
Template rendering for the console.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlencode

from fastapi import Request
from fastapi.templating import Jinja2Templates

from api.services import ConsoleServices
from console.navigation import MENU, open_group, selected_key
from models.entities import Subsidiary
from stores.ui_store import ALL_SUBSIDIARIES
from utils.error_handling import ApiError, AuthenticationError
from utils.formatting import format_currency, format_date, format_thousands, status_color

logger = logging.getLogger("finmanager.console")

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["currency"] = format_currency
templates.env.filters["date"] = format_date
templates.env.filters["thousands"] = format_thousands
templates.env.filters["status_color"] = status_color
templates.env.globals["MENU"] = MENU
templates.env.globals["ALL_SUBSIDIARIES"] = ALL_SUBSIDIARIES


def header_subsidiaries(services: ConsoleServices) -> List[Subsidiary]:
    """Options of the header's subsidiary selector; empty when the API is unavailable."""
    try:
        return services.subsidiaries.list({"pageSize": 100}).data
    except AuthenticationError:
        raise
    except ApiError as e:
        logger.warning(f"Subsidiary selector unavailable: {e.message}")
        return []


def query_url(path: str, values: Dict[str, Any]) -> str:
    return f"{path}?{urlencode(values)}" if values else path


def as_options(items: List[Any], value: str = "id", label: str = "name") -> List[Tuple[str, str]]:
    """(value, label) pairs for a select; plain strings are both."""
    if items and isinstance(items[0], str):
        return [(item, item) for item in items]
    return [(str(getattr(item, value)), str(getattr(item, label))) for item in items]


templates.env.globals["query_url"] = query_url
templates.env.filters["options"] = as_options


def render(
    request: Request,
    template_name: str,
    context: Optional[Dict[str, Any]] = None,
    status_code: int = 200,
):
    """
    Render a console page with the layout context.

    The layout needs the signed-in user, theme variables, menu selection,
    header subsidiaries and the queued notifications, which are drained here.
    """
    services: ConsoleServices = request.state.services
    authenticated = services.auth_store.is_authenticated
    page_context: Dict[str, Any] = {
        "request": request,
        "user": services.auth_store.user,
        "username": services.auth_store.username,
        "authenticated": authenticated,
        "theme": services.theme_store.theme,
        "css_variables": services.theme_store.css_variables(),
        "sidebar_collapsed": services.ui_store.sidebar_collapsed,
        "current_subsidiary": services.ui_store.current_subsidiary or ALL_SUBSIDIARIES,
        "selected_key": selected_key(request.url.path),
        "open_group": open_group(request.url.path),
        "year": datetime.now().year,
        "errors": {},
        "values": {},
    }
    page_context["header_subsidiaries"] = header_subsidiaries(services) if authenticated else []
    page_context.update(context or {})
    # Drain last so toasts queued while building the page are shown too
    page_context["notifications"] = services.notifications.drain()
    return templates.TemplateResponse(request, template_name, page_context, status_code=status_code)
