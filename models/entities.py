"""
Data models for the organisation: subsidiaries, employees and console users.
"""

from enum import Enum
from typing import Optional

from pydantic import Field

from models.base import FinManagerModel, SubsidiaryRef


class EmploymentStatus(str, Enum):
    """Employment status of an employee."""
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    TERMINATED = "TERMINATED"


class InvoiceTemplate(str, Enum):
    """Invoice layouts a subsidiary can be branded with."""
    DEFAULT = "default"
    CEMENT = "cement"
    AUTO = "auto"
    LOGISTICS = "logistics"


class Subsidiary(FinManagerModel):
    """Business unit that scopes invoices, employees, expenses and payouts."""
    id: str
    name: str
    code: str = ""
    description: Optional[str] = None
    logo_url: Optional[str] = None
    primary_color: str = "#8B2F39"
    invoice_template_id: str = InvoiceTemplate.DEFAULT.value
    business_address: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    is_active: bool = True
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def as_ref(self) -> SubsidiaryRef:
        return SubsidiaryRef(id=self.id, name=self.name)


class Employee(FinManagerModel):
    """Employee record with payroll bank details."""
    id: str
    subsidiary: Optional[SubsidiaryRef] = None
    first_name: str
    last_name: str
    email: str = ""
    phone_number: Optional[str] = None

    # Bank details
    bank_name: str = ""
    account_number: str = ""
    account_name: str = ""
    paystack_recipient_code: Optional[str] = None

    net_salary_cents: int = 0
    employment_status: EmploymentStatus = EmploymentStatus.ACTIVE
    hire_date: Optional[str] = None
    termination_date: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class User(FinManagerModel):
    """Signed-in console user."""
    id: str
    username: str
    email: Optional[str] = None


class UserProfile(FinManagerModel):
    """Editable profile shown on the settings page."""
    username: str = "admin"
    email: str = "user@example.com"
    phone: str = Field(default="+234 XXX XXX XXXX")
