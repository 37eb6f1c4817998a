"""
Subsidiary (business unit) form.
"""

from typing import Any, ClassVar, Dict, Optional

from pydantic import EmailStr, Field, field_validator

from forms.base import ConsoleForm
from models.entities import InvoiceTemplate, Subsidiary
from stores.theme_store import HEX_COLOR_PATTERN

MAX_CODE_LENGTH = 20
MAX_DESCRIPTION_LENGTH = 500
DEFAULT_PRIMARY_COLOR = "#8B2F39"


class SubsidiaryForm(ConsoleForm):
    form_name: ClassVar[str] = "subsidiary"
    required_messages: ClassVar[Dict[str, str]] = {
        "name": "Please enter name",
        "code": "Please enter code",
        "invoice_template_id": "Please select template",
    }
    invalid_messages: ClassVar[Dict[str, str]] = {
        "code": "Code must be max 20 characters",
        "contact_email": "Please enter a valid email",
        "primary_color": "Please pick a valid color",
        "invoice_template_id": "Please select template",
    }

    name: str
    code: str = Field(max_length=MAX_CODE_LENGTH)
    description: Optional[str] = Field(default=None, max_length=MAX_DESCRIPTION_LENGTH)
    logo_url: Optional[str] = None
    primary_color: str = Field(default=DEFAULT_PRIMARY_COLOR, pattern=HEX_COLOR_PATTERN)
    invoice_template_id: InvoiceTemplate = InvoiceTemplate.DEFAULT
    business_address: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = None

    @field_validator("code")
    @classmethod
    def uppercase_code(cls, v: str) -> str:
        return v.upper()

    @staticmethod
    def initial_values(subsidiary: Optional[Subsidiary] = None) -> Dict[str, Any]:
        if subsidiary is None:
            return {
                "primary_color": DEFAULT_PRIMARY_COLOR,
                "invoice_template_id": InvoiceTemplate.DEFAULT.value,
            }
        return {
            "name": subsidiary.name,
            "code": subsidiary.code,
            "description": subsidiary.description or "",
            "logo_url": subsidiary.logo_url or "",
            "primary_color": subsidiary.primary_color,
            "invoice_template_id": subsidiary.invoice_template_id,
            "business_address": subsidiary.business_address or "",
            "contact_email": subsidiary.contact_email or "",
            "contact_phone": subsidiary.contact_phone or "",
        }
