"""
Employee pages.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from api.services import ConsoleServices
from console.dependencies import list_filters, read_form, require_auth
from console.templates import header_subsidiaries, render
from forms.employee_form import EmployeeForm
from forms.filters import ListFilters, FilterField, SEARCH, page_count, status_filter, subsidiary_filter
from models.entities import Employee, EmploymentStatus
from utils.error_handling import ApiError, AuthenticationError, ValidationError
from utils.notifications import GENERIC_FAILURE

logger = logging.getLogger("finmanager.console")

router = APIRouter(tags=["employee_pages"])


@router.get("/employees", response_class=HTMLResponse)
def employees_page(
    request: Request,
    filters: ListFilters = Depends(list_filters),
    services: ConsoleServices = Depends(require_auth),
):
    """Employee list with search, subsidiary and status filters."""
    page = services.employees.list(filters.to_params())
    subsidiaries = header_subsidiaries(services)
    return render(request, "employees/list.html", {
        "title": "Employees",
        "description": "Manage employee information and payroll details",
        "page": page,
        "filters": filters,
        "filter_fields": [
            FilterField("search", SEARCH, "Search by name or email..."),
            subsidiary_filter(subsidiaries),
            status_filter(*[s.value for s in EmploymentStatus]),
        ],
        "page_count": page_count(page.total, filters.page_size),
    })


def _render_form(request: Request, services: ConsoleServices, employee: Optional[Employee],
                 values: Dict[str, Any], errors: Optional[Dict[str, str]] = None, status_code: int = 200):
    return render(request, "employees/form.html", {
        "title": "Edit Employee" if employee else "Create Employee",
        "employee": employee,
        "values": values,
        "errors": errors or {},
        "subsidiaries": header_subsidiaries(services),
        "statuses": [s.value for s in EmploymentStatus],
    }, status_code=status_code)


@router.get("/employees/new", response_class=HTMLResponse)
def new_employee_page(request: Request, services: ConsoleServices = Depends(require_auth)):
    return _render_form(request, services, None, EmployeeForm.initial_values())


@router.post("/employees")
def create_employee(
    request: Request,
    values: Dict[str, Any] = Depends(read_form),
    services: ConsoleServices = Depends(require_auth),
):
    try:
        form = EmployeeForm.validate_form(values)
    except ValidationError as e:
        return _render_form(request, services, None, values, e.field_errors, status_code=400)

    try:
        services.employees.create(form.to_payload())
    except AuthenticationError:
        raise
    except ApiError:
        services.notifications.error("Error", GENERIC_FAILURE)
        return _render_form(request, services, None, values, status_code=400)

    services.notifications.success("Success", "Employee created successfully")
    return RedirectResponse("/employees", status_code=303)


@router.get("/employees/{employee_id}/edit", response_class=HTMLResponse)
def edit_employee_page(employee_id: str, request: Request, services: ConsoleServices = Depends(require_auth)):
    employee = services.employees.get(employee_id)
    return _render_form(request, services, employee, EmployeeForm.initial_values(employee))


@router.post("/employees/{employee_id}")
def update_employee(
    employee_id: str,
    request: Request,
    values: Dict[str, Any] = Depends(read_form),
    services: ConsoleServices = Depends(require_auth),
):
    employee = services.employees.get(employee_id)
    try:
        form = EmployeeForm.validate_form(values)
    except ValidationError as e:
        return _render_form(request, services, employee, values, e.field_errors, status_code=400)

    try:
        services.employees.update(employee_id, form.to_payload())
    except AuthenticationError:
        raise
    except ApiError:
        services.notifications.error("Error", GENERIC_FAILURE)
        return _render_form(request, services, employee, values, status_code=400)

    services.notifications.success("Success", "Employee updated successfully")
    return RedirectResponse("/employees", status_code=303)


@router.post("/employees/{employee_id}/delete")
def delete_employee(employee_id: str, services: ConsoleServices = Depends(require_auth)):
    try:
        employee = services.employees.get(employee_id)
        services.employees.delete(employee_id)
    except AuthenticationError:
        raise
    except ApiError:
        services.notifications.error("Delete Failed", "Failed to delete employee. Please try again.")
    else:
        services.notifications.success("Employee Deleted", f"{employee.full_name} has been deleted")
    return RedirectResponse("/employees", status_code=303)
