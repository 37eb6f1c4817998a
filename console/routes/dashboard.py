"""
Dashboard page and the header actions shared by every page.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from api.services import ConsoleServices
from console.dependencies import read_form, require_auth, safe_back_path
from console.templates import render
from utils.error_handling import ApiError, AuthenticationError

logger = logging.getLogger("finmanager.console")

router = APIRouter(tags=["dashboard_pages"])

RECENT_INVOICES = 5


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard_page(request: Request, services: ConsoleServices = Depends(require_auth)):
    """Headline statistics and the latest invoices."""
    stats = None
    recent_invoices = []
    unavailable = False
    try:
        stats = services.dashboard.stats()
        recent_invoices = services.invoices.list({
            "pageSize": RECENT_INVOICES,
            "subsidiary": services.ui_store.subsidiary_filter(),
        }).data
    except AuthenticationError:
        raise
    except ApiError as e:
        logger.warning(f"Dashboard data unavailable: {e.message}")
        unavailable = True

    return render(request, "dashboard.html", {
        "title": "Dashboard",
        "stats": stats,
        "recent_invoices": recent_invoices,
        "unavailable": unavailable,
    })


@router.post("/refresh")
def refresh(request: Request, services: ConsoleServices = Depends(require_auth)):
    """Header refresh button: drop every cached response."""
    services.refresh()
    services.notifications.success("Data refreshed")
    return RedirectResponse(safe_back_path(request), status_code=303)


@router.post("/subsidiary")
def select_subsidiary(
    request: Request,
    values: Dict[str, Any] = Depends(read_form),
    services: ConsoleServices = Depends(require_auth),
):
    """Header subsidiary selector."""
    services.ui_store.set_current_subsidiary(values.get("subsidiary") or None)
    return RedirectResponse(safe_back_path(request), status_code=303)


@router.post("/sidebar/toggle")
def toggle_sidebar(request: Request, services: ConsoleServices = Depends(require_auth)):
    services.ui_store.toggle_sidebar()
    return RedirectResponse(safe_back_path(request), status_code=303)
