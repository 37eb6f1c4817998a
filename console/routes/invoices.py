"""
Invoice pages.

The line item editor is a plain form: rows are posted as indexed inputs and
the "add line item" and "remove" buttons re-render the form with the rows
changed, without saving.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from api.services import ConsoleServices
from console.dependencies import list_filters, read_form, require_auth
from console.templates import header_subsidiaries, render
from forms.filters import (
    FilterField, ListFilters, SEARCH, date_range_filter, page_count, status_filter, subsidiary_filter,
)
from forms.invoice_form import InvoiceForm, blank_line_item, line_items_from_inputs
from models.documents import Invoice, InvoiceStatus, PaymentTerms
from utils.error_handling import ApiError, AuthenticationError, ValidationError
from utils.notifications import GENERIC_FAILURE

logger = logging.getLogger("finmanager.console")

router = APIRouter(tags=["invoice_pages"])

ADD_LINE = "add_line"
REMOVE_LINE_PREFIX = "remove_line:"


@router.get("/invoices", response_class=HTMLResponse)
def invoices_page(
    request: Request,
    filters: ListFilters = Depends(list_filters),
    services: ConsoleServices = Depends(require_auth),
):
    """Invoice list with search, subsidiary, status and date range filters."""
    page = services.invoices.list(filters.to_params())
    return render(request, "invoices/list.html", {
        "title": "Invoices",
        "description": "Manage and track all invoices",
        "page": page,
        "filters": filters,
        "filter_fields": [
            FilterField("search", SEARCH, "Search invoices..."),
            subsidiary_filter(header_subsidiaries(services)),
            status_filter(*[s.value for s in InvoiceStatus]),
            date_range_filter(),
        ],
        "page_count": page_count(page.total, filters.page_size),
    })


def _render_form(request: Request, services: ConsoleServices, invoice: Optional[Invoice],
                 values: Dict[str, Any], line_items: List[Dict[str, Any]],
                 errors: Optional[Dict[str, str]] = None, status_code: int = 200):
    return render(request, "invoices/form.html", {
        "title": "Edit Invoice" if invoice else "Create Invoice",
        "invoice": invoice,
        "values": values,
        "line_items": line_items or [blank_line_item()],
        "errors": errors or {},
        "subsidiaries": header_subsidiaries(services),
        "payment_terms": [t.value for t in PaymentTerms],
    }, status_code=status_code)


def _edited_rows(values: Dict[str, Any]) -> Optional[List[Dict[str, Any]]]:
    """Rows after an add/remove button press, or None for a real submit."""
    action = values.get("action") or ""
    if action == ADD_LINE:
        return line_items_from_inputs(values) + [blank_line_item()]
    if action.startswith(REMOVE_LINE_PREFIX):
        rows = _posted_rows(values)
        index = action[len(REMOVE_LINE_PREFIX):]
        if index.isdigit() and int(index) < len(rows):
            rows.pop(int(index))
        return rows
    return None


def _posted_rows(values: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Every posted row, blank ones included, in input order."""
    rows: Dict[int, Dict[str, Any]] = {}
    for key, value in values.items():
        parts = key.split("-", 2)
        if len(parts) == 3 and parts[0] == "lineItems" and parts[1].isdigit():
            rows.setdefault(int(parts[1]), {})[parts[2]] = value
    return [rows[i] for i in sorted(rows)]


def _save(request: Request, services: ConsoleServices, invoice: Optional[Invoice], values: Dict[str, Any]):
    rows = _edited_rows(values)
    if rows is not None:
        return _render_form(request, services, invoice, values, rows)

    try:
        form = InvoiceForm.from_inputs(values)
    except ValidationError as e:
        return _render_form(request, services, invoice, values, line_items_from_inputs(values),
                            e.field_errors, status_code=400)

    try:
        if invoice:
            services.invoices.update(invoice.id, form.to_payload())
        else:
            services.invoices.create(form.to_payload())
    except AuthenticationError:
        raise
    except ApiError:
        services.notifications.error("Error", GENERIC_FAILURE)
        return _render_form(request, services, invoice, values, line_items_from_inputs(values), status_code=400)

    services.notifications.success(
        "Success", "Invoice updated successfully" if invoice else "Invoice created successfully"
    )
    return RedirectResponse("/invoices", status_code=303)


@router.get("/invoices/new", response_class=HTMLResponse)
def new_invoice_page(request: Request, services: ConsoleServices = Depends(require_auth)):
    values = InvoiceForm.initial_values()
    return _render_form(request, services, None, values, values.pop("lineItems"))


@router.post("/invoices")
def create_invoice(
    request: Request,
    values: Dict[str, Any] = Depends(read_form),
    services: ConsoleServices = Depends(require_auth),
):
    return _save(request, services, None, values)


@router.get("/invoices/{invoice_id}", response_class=HTMLResponse)
def invoice_detail_page(invoice_id: str, request: Request, services: ConsoleServices = Depends(require_auth)):
    invoice = services.invoices.get(invoice_id)
    return render(request, "invoices/detail.html", {
        "title": f"Invoice {invoice.invoice_number}",
        "invoice": invoice,
    })


@router.get("/invoices/{invoice_id}/edit", response_class=HTMLResponse)
def edit_invoice_page(invoice_id: str, request: Request, services: ConsoleServices = Depends(require_auth)):
    invoice = services.invoices.get(invoice_id)
    values = InvoiceForm.initial_values(invoice)
    return _render_form(request, services, invoice, values, values.pop("lineItems"))


@router.post("/invoices/{invoice_id}")
def update_invoice(
    invoice_id: str,
    request: Request,
    values: Dict[str, Any] = Depends(read_form),
    services: ConsoleServices = Depends(require_auth),
):
    return _save(request, services, services.invoices.get(invoice_id), values)


@router.post("/invoices/{invoice_id}/send")
def send_invoice(invoice_id: str, services: ConsoleServices = Depends(require_auth)):
    try:
        services.invoices.send(invoice_id)
    except AuthenticationError:
        raise
    except ApiError:
        services.notifications.error("Failed to send invoice")
    else:
        services.notifications.success("Invoice sent successfully")
    return RedirectResponse(f"/invoices/{invoice_id}", status_code=303)


@router.get("/invoices/{invoice_id}/pdf")
def download_invoice_pdf(invoice_id: str, services: ConsoleServices = Depends(require_auth)):
    """Open the stored PDF; invoices without one go back to the detail page."""
    invoice = services.invoices.get(invoice_id)
    if invoice.has_pdf:
        return RedirectResponse(invoice.pdf_storage_url, status_code=303)
    services.notifications.info("PDF not yet generated")
    return RedirectResponse(f"/invoices/{invoice_id}", status_code=303)


@router.post("/invoices/{invoice_id}/delete")
def delete_invoice(invoice_id: str, services: ConsoleServices = Depends(require_auth)):
    try:
        services.invoices.delete(invoice_id)
    except AuthenticationError:
        raise
    except ApiError:
        services.notifications.error("Failed to delete invoice")
        return RedirectResponse(f"/invoices/{invoice_id}", status_code=303)
    services.notifications.success("Invoice deleted")
    return RedirectResponse("/invoices", status_code=303)
