"""
Payout pages and the Execute Payout wizard.

The wizard state lives in the session between requests; each POST moves it
one step and redirects back to /payouts/execute.
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from api.services import ConsoleServices
from console.dependencies import list_filters, read_form, require_auth
from console.templates import header_subsidiaries, render
from forms.filters import (
    FilterField, ListFilters, SEARCH, date_range_filter, page_count, status_filter, subsidiary_filter,
)
from models.entities import Employee
from models.payouts import PayoutStatus
from utils.error_handling import ApiError, AuthenticationError, ValidationError
from workflow.payout_execution import PayoutExecutionWizard, WizardStep

logger = logging.getLogger("finmanager.console")

router = APIRouter(tags=["payout_pages"])

WIZARD_SESSION_KEY = "payout-wizard"
WIZARD_PATH = "/payouts/execute"
EMPLOYEE_PAGE_SIZE = 100


@router.get("/payouts", response_class=HTMLResponse)
def payouts_page(
    request: Request,
    filters: ListFilters = Depends(list_filters),
    services: ConsoleServices = Depends(require_auth),
):
    """Payout history with search, subsidiary, status and date range filters."""
    page = services.payouts.list(filters.to_params())
    return render(request, "payouts/list.html", {
        "title": "Payouts",
        "description": "Track salary and reimbursement payouts",
        "page": page,
        "filters": filters,
        "filter_fields": [
            FilterField("search", SEARCH, "Search payouts..."),
            subsidiary_filter(header_subsidiaries(services)),
            status_filter(*[s.value for s in PayoutStatus]),
            date_range_filter(),
        ],
        "page_count": page_count(page.total, filters.page_size),
    })


# Wizard routes come before /payouts/{payout_id}

def load_wizard(request: Request, services: ConsoleServices) -> PayoutExecutionWizard:
    return PayoutExecutionWizard.from_dict(
        services.session.get(WIZARD_SESSION_KEY), request.app.state.config
    )


def save_wizard(services: ConsoleServices, wizard: PayoutExecutionWizard) -> None:
    services.session.set(WIZARD_SESSION_KEY, wizard.to_dict())


def _wizard_redirect() -> RedirectResponse:
    return RedirectResponse(WIZARD_PATH, status_code=303)


def _selectable_employees(services: ConsoleServices) -> List[Employee]:
    return services.employees.list({"pageSize": EMPLOYEE_PAGE_SIZE}).data


def _submitted_ids(values: Dict[str, Any]) -> List[str]:
    ids = values.get("employee_ids") or []
    if isinstance(ids, str):
        ids = [ids]
    return [i for i in ids if i]


@router.get(WIZARD_PATH, response_class=HTMLResponse)
def execute_payout_page(request: Request, services: ConsoleServices = Depends(require_auth)):
    wizard = load_wizard(request, services)
    employees: List[Employee] = []
    if wizard.step == WizardStep.SELECT:
        employees = _selectable_employees(services)
    return render(request, "payouts/execute.html", {
        "title": "Execute Payout",
        "wizard": wizard,
        "steps": list(WizardStep),
        "WizardStep": WizardStep,
        "employees": employees,
        "selected_ids": set(wizard.selected_ids),
    })


@router.post(WIZARD_PATH + "/select")
def select_employees(
    request: Request,
    values: Dict[str, Any] = Depends(read_form),
    services: ConsoleServices = Depends(require_auth),
):
    """Store the selection and continue to the dry run."""
    wizard = load_wizard(request, services)
    ids = set(_submitted_ids(values))
    try:
        wizard.select(e for e in _selectable_employees(services) if e.id in ids)
        wizard.next()
    except ValidationError as e:
        services.notifications.error(e.message)
    save_wizard(services, wizard)
    return _wizard_redirect()


@router.post(WIZARD_PATH + "/next")
def next_step(request: Request, services: ConsoleServices = Depends(require_auth)):
    wizard = load_wizard(request, services)
    try:
        wizard.next()
    except ValidationError as e:
        services.notifications.error(e.message)
    save_wizard(services, wizard)
    return _wizard_redirect()


@router.post(WIZARD_PATH + "/back")
def previous_step(request: Request, services: ConsoleServices = Depends(require_auth)):
    wizard = load_wizard(request, services)
    wizard.back()
    save_wizard(services, wizard)
    return _wizard_redirect()


@router.post(WIZARD_PATH + "/otp")
def request_otp(request: Request, services: ConsoleServices = Depends(require_auth)):
    wizard = load_wizard(request, services)
    try:
        services.notifications.success(wizard.request_otp())
    except ValidationError as e:
        services.notifications.error(e.message)
    save_wizard(services, wizard)
    return _wizard_redirect()


@router.post(WIZARD_PATH + "/run")
def run_payout(
    request: Request,
    values: Dict[str, Any] = Depends(read_form),
    services: ConsoleServices = Depends(require_auth),
):
    """Verify the OTP and execute the transfers."""
    wizard = load_wizard(request, services)
    try:
        wizard.execute(values.get("otp"))
    except ValidationError as e:
        services.notifications.error(e.message)
    else:
        if wizard.failure_count:
            services.notifications.warning("Payout completed", wizard.summary)
        else:
            services.notifications.success("Payout completed", wizard.summary)
    save_wizard(services, wizard)
    return _wizard_redirect()


@router.post(WIZARD_PATH + "/reset")
def reset_wizard(services: ConsoleServices = Depends(require_auth)):
    services.session.delete(WIZARD_SESSION_KEY)
    return _wizard_redirect()


@router.get("/payouts/{payout_id}", response_class=HTMLResponse)
def payout_detail_page(payout_id: str, request: Request, services: ConsoleServices = Depends(require_auth)):
    payout = services.payouts.get(payout_id)
    return render(request, "payouts/detail.html", {
        "title": "Payout Details",
        "payout": payout,
    })


@router.post("/payouts/{payout_id}/retry")
def retry_payout(payout_id: str, services: ConsoleServices = Depends(require_auth)):
    try:
        services.payouts.retry(payout_id)
    except AuthenticationError:
        raise
    except ApiError:
        services.notifications.error("Retry Failed", "Failed to retry payout. Please try again.")
    else:
        services.notifications.success("Payout Retried", "The payout has been queued for retry")
    return RedirectResponse("/payouts", status_code=303)
