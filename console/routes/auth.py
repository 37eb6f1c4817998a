"""
Login and logout pages.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from api.services import ConsoleServices
from console.dependencies import get_services, read_form
from console.templates import render
from forms.account_forms import LoginForm
from utils.error_handling import ApiError, ValidationError

logger = logging.getLogger("finmanager.console")

router = APIRouter(tags=["auth_pages"])


@router.get("/")
def root():
    return RedirectResponse("/dashboard", status_code=303)


@router.get("/login", response_class=HTMLResponse)
def login_page(request: Request, services: ConsoleServices = Depends(get_services)):
    """Login page"""
    if services.auth_store.is_authenticated:
        return RedirectResponse("/dashboard", status_code=303)
    return render(request, "auth/login.html", {"title": "Login"})


@router.post("/login")
def login(
    request: Request,
    values: Dict[str, Any] = Depends(read_form),
    services: ConsoleServices = Depends(get_services),
):
    try:
        form = LoginForm.validate_form(values)
        services.auth.login(form.username, form.password)
    except ValidationError as e:
        return render(request, "auth/login.html",
                      {"title": "Login", "errors": e.field_errors, "values": {"username": values.get("username", "")}},
                      status_code=400)
    except ApiError as e:
        message = e.message if e.status_code and e.status_code < 500 else "Login failed"
        services.notifications.error(message)
        return render(request, "auth/login.html",
                      {"title": "Login", "values": {"username": values.get("username", "")}},
                      status_code=400)

    services.session.rotate_id()
    services.notifications.success("Login successful")
    return RedirectResponse("/dashboard", status_code=303)


@router.post("/logout")
def logout(services: ConsoleServices = Depends(get_services)):
    services.auth.logout()
    services.session.rotate_id()
    services.notifications.info("Logged out successfully")
    return RedirectResponse("/login", status_code=303)
