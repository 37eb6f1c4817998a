"""
Expense claim pages.
"""

import logging
from typing import Any, Callable, Dict, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from api.services import ConsoleServices
from console.dependencies import list_filters, read_form, require_auth
from console.templates import header_subsidiaries, render
from forms.expense_form import ExpenseForm
from forms.filters import FilterField, ListFilters, SEARCH, SELECT, date_range_filter, page_count, status_filter
from models.documents import Expense, ExpenseCategory, ExpenseStatus
from utils.error_handling import ApiError, AuthenticationError, ValidationError

logger = logging.getLogger("finmanager.console")

router = APIRouter(tags=["expense_pages"])

EMPLOYEE_OPTIONS_PAGE_SIZE = 100


def category_filter() -> FilterField:
    return FilterField(
        name="category",
        type=SELECT,
        placeholder="All Categories",
        options=[(c.value, c.value.capitalize()) for c in ExpenseCategory],
    )


@router.get("/expenses", response_class=HTMLResponse)
def expenses_page(
    request: Request,
    filters: ListFilters = Depends(list_filters),
    services: ConsoleServices = Depends(require_auth),
):
    """Expense claims with search, category, status and date range filters."""
    page = services.expenses.list(filters.to_params())
    return render(request, "expenses/list.html", {
        "title": "Expense Claims",
        "description": "Review and manage employee expense claims",
        "page": page,
        "filters": filters,
        "filter_fields": [
            FilterField("search", SEARCH, "Search by description..."),
            category_filter(),
            status_filter(*[s.value for s in ExpenseStatus]),
            date_range_filter(),
        ],
        "page_count": page_count(page.total, filters.page_size),
    })


def _employee_options(services: ConsoleServices) -> list:
    try:
        return services.employees.list({"pageSize": EMPLOYEE_OPTIONS_PAGE_SIZE}).data
    except AuthenticationError:
        raise
    except ApiError as e:
        logger.warning(f"Employee options unavailable: {e.message}")
        return []


def _render_form(request: Request, services: ConsoleServices, values: Dict[str, Any],
                 errors: Optional[Dict[str, str]] = None, status_code: int = 200):
    return render(request, "expenses/form.html", {
        "title": "New Expense Claim",
        "values": values,
        "errors": errors or {},
        "employees": _employee_options(services),
        "subsidiaries": header_subsidiaries(services),
        "categories": [c.value for c in ExpenseCategory],
    }, status_code=status_code)


@router.get("/expenses/new", response_class=HTMLResponse)
def new_expense_page(request: Request, services: ConsoleServices = Depends(require_auth)):
    return _render_form(request, services, ExpenseForm.initial_values())


@router.post("/expenses")
def create_expense(
    request: Request,
    values: Dict[str, Any] = Depends(read_form),
    services: ConsoleServices = Depends(require_auth),
):
    try:
        form = ExpenseForm.validate_form(values)
    except ValidationError as e:
        return _render_form(request, services, values, e.field_errors, status_code=400)

    try:
        services.expenses.create(form.to_payload())
    except AuthenticationError:
        raise
    except ApiError:
        services.notifications.error("Failed to create expense. Please try again.")
        return _render_form(request, services, values, status_code=400)

    services.notifications.success("Expense created successfully")
    return RedirectResponse("/expenses", status_code=303)


def _transition(services: ConsoleServices, expense_id: str, action: Callable[[str], Optional[Expense]],
                done_title: str, done_verb: str, failed_title: str, failed_verb: str) -> RedirectResponse:
    """Run an approve/reject/reimburse action and queue the matching toast."""
    try:
        expense = services.expenses.get(expense_id)
        action(expense_id)
    except AuthenticationError:
        raise
    except ApiError:
        services.notifications.error(failed_title, f"Failed to {failed_verb} expense. Please try again.")
    else:
        services.notifications.success(done_title, f"Expense for {expense.employee_name} has been {done_verb}")
    return RedirectResponse("/expenses", status_code=303)


@router.post("/expenses/{expense_id}/approve")
def approve_expense(expense_id: str, services: ConsoleServices = Depends(require_auth)):
    return _transition(services, expense_id, services.expenses.approve,
                       "Expense Approved", "approved", "Approval Failed", "approve")


@router.post("/expenses/{expense_id}/reject")
def reject_expense(expense_id: str, services: ConsoleServices = Depends(require_auth)):
    return _transition(services, expense_id, services.expenses.reject,
                       "Expense Rejected", "rejected", "Rejection Failed", "reject")


@router.post("/expenses/{expense_id}/reimburse")
def reimburse_expense(expense_id: str, services: ConsoleServices = Depends(require_auth)):
    return _transition(services, expense_id, services.expenses.reimburse,
                       "Expense Reimbursed", "reimbursed", "Reimbursement Failed", "reimburse")
