"""
Subsidiary pages.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from api.services import ConsoleServices
from console.dependencies import read_form, require_auth
from console.templates import render
from forms.filters import FilterField, ListFilters, SEARCH, SELECT, page_count
from forms.subsidiary_form import SubsidiaryForm
from models.entities import InvoiceTemplate, Subsidiary
from utils.error_handling import ApiError, AuthenticationError, ValidationError
from utils.notifications import GENERIC_FAILURE

logger = logging.getLogger("finmanager.console")

router = APIRouter(tags=["subsidiary_pages"])


def active_filter() -> FilterField:
    return FilterField(
        name="isActive",
        type=SELECT,
        placeholder="All Statuses",
        options=[("true", "Active"), ("false", "Inactive")],
    )


@router.get("/subsidiaries", response_class=HTMLResponse)
def subsidiaries_page(request: Request, services: ConsoleServices = Depends(require_auth)):
    """
    Subsidiary list with search and active filters.

    The header's subsidiary selection does not apply here.
    """
    filters = ListFilters.from_query(request.query_params)
    page = services.subsidiaries.list(filters.to_params())
    return render(request, "subsidiaries/list.html", {
        "title": "Subsidiaries",
        "description": "Manage your business units",
        "page": page,
        "filters": filters,
        "filter_fields": [
            FilterField("search", SEARCH, "Search subsidiaries..."),
            active_filter(),
        ],
        "page_count": page_count(page.total, filters.page_size),
    })


def _render_form(request: Request, subsidiary: Optional[Subsidiary], values: Dict[str, Any],
                 errors: Optional[Dict[str, str]] = None, status_code: int = 200):
    return render(request, "subsidiaries/form.html", {
        "title": "Edit Subsidiary" if subsidiary else "Create Subsidiary",
        "subsidiary": subsidiary,
        "values": values,
        "errors": errors or {},
        "invoice_templates": [t.value for t in InvoiceTemplate],
    }, status_code=status_code)


def _save(request: Request, services: ConsoleServices, subsidiary: Optional[Subsidiary], values: Dict[str, Any]):
    try:
        form = SubsidiaryForm.validate_form(values)
    except ValidationError as e:
        return _render_form(request, subsidiary, values, e.field_errors, status_code=400)

    try:
        if subsidiary:
            services.subsidiaries.update(subsidiary.id, form.to_payload())
        else:
            services.subsidiaries.create(form.to_payload())
    except AuthenticationError:
        raise
    except ApiError:
        services.notifications.error("Error", GENERIC_FAILURE)
        return _render_form(request, subsidiary, values, status_code=400)

    services.notifications.success(
        "Success", "Subsidiary updated successfully" if subsidiary else "Subsidiary created successfully"
    )
    return RedirectResponse("/subsidiaries", status_code=303)


@router.get("/subsidiaries/new", response_class=HTMLResponse)
def new_subsidiary_page(request: Request, services: ConsoleServices = Depends(require_auth)):
    return _render_form(request, None, SubsidiaryForm.initial_values())


@router.post("/subsidiaries")
def create_subsidiary(
    request: Request,
    values: Dict[str, Any] = Depends(read_form),
    services: ConsoleServices = Depends(require_auth),
):
    return _save(request, services, None, values)


@router.get("/subsidiaries/{subsidiary_id}/edit", response_class=HTMLResponse)
def edit_subsidiary_page(subsidiary_id: str, request: Request, services: ConsoleServices = Depends(require_auth)):
    subsidiary = services.subsidiaries.get(subsidiary_id)
    return _render_form(request, subsidiary, SubsidiaryForm.initial_values(subsidiary))


@router.post("/subsidiaries/{subsidiary_id}")
def update_subsidiary(
    subsidiary_id: str,
    request: Request,
    values: Dict[str, Any] = Depends(read_form),
    services: ConsoleServices = Depends(require_auth),
):
    return _save(request, services, services.subsidiaries.get(subsidiary_id), values)


@router.post("/subsidiaries/{subsidiary_id}/toggle")
def toggle_subsidiary(subsidiary_id: str, services: ConsoleServices = Depends(require_auth)):
    """Flip the active flag of a subsidiary."""
    subsidiary = services.subsidiaries.get(subsidiary_id)
    activate = not subsidiary.is_active
    verb = "activate" if activate else "deactivate"
    try:
        services.subsidiaries.toggle_status(subsidiary_id, activate)
    except AuthenticationError:
        raise
    except ApiError:
        services.notifications.error("Error", f"Failed to {verb} subsidiary. Please try again.")
    else:
        services.notifications.success("Success", f"{subsidiary.name} has been {verb}d")
    return RedirectResponse("/subsidiaries", status_code=303)


@router.post("/subsidiaries/{subsidiary_id}/delete")
def delete_subsidiary(subsidiary_id: str, services: ConsoleServices = Depends(require_auth)):
    try:
        subsidiary = services.subsidiaries.get(subsidiary_id)
        services.subsidiaries.delete(subsidiary_id)
    except AuthenticationError:
        raise
    except ApiError:
        services.notifications.error("Delete Failed", "Failed to delete subsidiary. It may have linked records.")
    else:
        services.notifications.success("Subsidiary Deleted", f"{subsidiary.name} has been deleted")
    return RedirectResponse("/subsidiaries", status_code=303)
