"""
App settings pages: profile, notification templates and theme.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError as PydanticValidationError

from api.services import ConsoleServices
from console.dependencies import read_form, require_auth
from console.templates import render
from forms.account_forms import NotificationTemplateForm, PasswordChangeForm, ProfileForm
from stores.theme_store import COLOR_GROUPS, THEME_PRESETS
from utils.error_handling import ApiError, AuthenticationError, ValidationError

logger = logging.getLogger("finmanager.console")

router = APIRouter(tags=["settings_pages"])

THEME_FIELDS = [name for group in COLOR_GROUPS for name, _, _ in group["colors"]] + ["border_radius"]


@router.get("/settings", response_class=HTMLResponse)
def settings_page(request: Request, services: ConsoleServices = Depends(require_auth)):
    return render(request, "settings/index.html", {"title": "App Settings"})


def _render_profile(request: Request, services: ConsoleServices, profile_values: Optional[Dict[str, Any]] = None,
                    profile_errors: Optional[Dict[str, str]] = None, password_errors: Optional[Dict[str, str]] = None,
                    status_code: int = 200):
    return render(request, "settings/profile.html", {
        "title": "User Profile",
        "profile": services.profile.get(),
        "profile_values": profile_values or services.profile.get().model_dump(),
        "profile_errors": profile_errors or {},
        "password_errors": password_errors or {},
    }, status_code=status_code)


@router.get("/settings/profile", response_class=HTMLResponse)
def profile_page(request: Request, services: ConsoleServices = Depends(require_auth)):
    return _render_profile(request, services)


@router.post("/settings/profile")
def update_profile(
    request: Request,
    values: Dict[str, Any] = Depends(read_form),
    services: ConsoleServices = Depends(require_auth),
):
    try:
        form = ProfileForm.validate_form(values)
    except ValidationError as e:
        return _render_profile(request, services, profile_values=values,
                               profile_errors=e.field_errors, status_code=400)
    # The username is shown read-only
    services.profile.update_profile(form.model_dump(exclude={"username"}))
    services.notifications.success("Success", "Profile updated successfully")
    return RedirectResponse("/settings/profile", status_code=303)


@router.post("/settings/password")
def change_password(
    request: Request,
    values: Dict[str, Any] = Depends(read_form),
    services: ConsoleServices = Depends(require_auth),
):
    try:
        form = PasswordChangeForm.validate_form(values)
    except ValidationError as e:
        return _render_profile(request, services, password_errors=e.field_errors, status_code=400)
    services.profile.change_password(form.current_password, form.new_password)
    services.notifications.success("Success", "Password changed successfully")
    return RedirectResponse("/settings/profile", status_code=303)


@router.get("/settings/notifications", response_class=HTMLResponse)
def notification_templates_page(request: Request, services: ConsoleServices = Depends(require_auth)):
    return render(request, "settings/notifications.html", {
        "title": "Notification Templates",
        "templates": services.templates.list(),
    })


@router.get("/settings/notifications/{template_id}", response_class=HTMLResponse)
def edit_template_page(template_id: str, request: Request, services: ConsoleServices = Depends(require_auth)):
    template = services.templates.get(template_id)
    return render(request, "settings/template_form.html", {
        "title": f"Edit Template: {template.code}",
        "template": template,
        "values": {"subject": template.subject, "body": template.body},
    })


@router.post("/settings/notifications/{template_id}")
def update_template(
    template_id: str,
    request: Request,
    values: Dict[str, Any] = Depends(read_form),
    services: ConsoleServices = Depends(require_auth),
):
    template = services.templates.get(template_id)
    try:
        form = NotificationTemplateForm.validate_form(values)
        services.templates.update(template_id, form.subject, form.body)
    except ValidationError as e:
        return render(request, "settings/template_form.html", {
            "title": f"Edit Template: {template.code}",
            "template": template,
            "values": values,
            "errors": e.field_errors,
        }, status_code=400)
    except AuthenticationError:
        raise
    except ApiError:
        services.notifications.error("Error", "Failed to update template")
        return RedirectResponse(f"/settings/notifications/{template_id}", status_code=303)

    services.notifications.success("Success", "Template updated successfully")
    return RedirectResponse("/settings/notifications", status_code=303)


@router.get("/settings/theme", response_class=HTMLResponse)
def theme_page(request: Request, services: ConsoleServices = Depends(require_auth)):
    return render(request, "settings/theme.html", {
        "title": "Theme Customization",
        "color_groups": COLOR_GROUPS,
        "presets": list(THEME_PRESETS),
        "current": services.theme_store.theme.model_dump(),
    })


@router.post("/settings/theme")
def update_theme(
    request: Request,
    values: Dict[str, Any] = Depends(read_form),
    services: ConsoleServices = Depends(require_auth),
):
    """Save the colors and border radius from the theme form."""
    changes = {k: values[k] for k in THEME_FIELDS if values.get(k) not in (None, "")}
    try:
        services.theme_store.update_theme(**changes)
    except PydanticValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        logger.info(f"Theme update rejected: {', '.join(fields)}")
        services.notifications.error("Invalid theme value", ", ".join(fields))
    return RedirectResponse("/settings/theme", status_code=303)


@router.post("/settings/theme/preset/{preset_name}")
def apply_theme_preset(preset_name: str, services: ConsoleServices = Depends(require_auth)):
    services.theme_store.apply_preset(preset_name)
    services.notifications.success(f"{preset_name.capitalize()} theme applied!")
    return RedirectResponse("/settings/theme", status_code=303)


@router.post("/settings/theme/reset")
def reset_theme(services: ConsoleServices = Depends(require_auth)):
    services.theme_store.reset_theme()
    return RedirectResponse("/settings/theme", status_code=303)
