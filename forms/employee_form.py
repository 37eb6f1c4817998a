"""
Employee create/edit form.
"""

from datetime import date
from decimal import Decimal
from typing import Any, ClassVar, Dict, Optional

from pydantic import EmailStr, Field, field_validator

from forms.base import ConsoleForm, cents_to_input, parse_amount
from models.entities import Employee, EmploymentStatus
from utils.formatting import to_cents, to_iso_datetime


class EmployeeForm(ConsoleForm):
    form_name: ClassVar[str] = "employee"
    required_messages: ClassVar[Dict[str, str]] = {
        "first_name": "Please enter first name",
        "last_name": "Please enter last name",
        "email": "Please enter email",
        "subsidiaryId": "Please select a subsidiary",
        "employment_status": "Please select status",
        "hire_date": "Please select hire date",
        "bank_name": "Please enter bank name",
        "account_number": "Please enter account number",
        "account_name": "Please enter account name",
        "net_salary": "Please enter salary",
    }
    invalid_messages: ClassVar[Dict[str, str]] = {
        "email": "Please enter a valid email",
        "hire_date": "Please select hire date",
        "employment_status": "Please select status",
    }

    # Personal
    first_name: str
    last_name: str
    email: EmailStr
    phone_number: Optional[str] = None

    # Employment
    subsidiary_id: str = Field(alias="subsidiaryId")
    employment_status: EmploymentStatus = EmploymentStatus.ACTIVE
    hire_date: date

    # Bank
    bank_name: str
    account_number: str
    account_name: str
    paystack_recipient_code: Optional[str] = None

    net_salary: Decimal

    @field_validator("net_salary", mode="before")
    @classmethod
    def clean_salary(cls, v: Any) -> Any:
        return parse_amount(v)

    @field_validator("net_salary")
    @classmethod
    def salary_positive(cls, v: Decimal) -> Decimal:
        if v < 1:
            raise ValueError("Salary must be greater than 0")
        return v

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload.pop("net_salary", None)
        payload["net_salary_cents"] = to_cents(self.net_salary)
        payload["hire_date"] = to_iso_datetime(self.hire_date)
        return payload

    @staticmethod
    def initial_values(employee: Optional[Employee] = None) -> Dict[str, Any]:
        """Input values for the edit form; blank for a new employee."""
        if employee is None:
            return {"employment_status": EmploymentStatus.ACTIVE.value}
        return {
            "first_name": employee.first_name,
            "last_name": employee.last_name,
            "email": employee.email,
            "phone_number": employee.phone_number or "",
            "subsidiaryId": employee.subsidiary.id if employee.subsidiary else "",
            "employment_status": employee.employment_status.value,
            "hire_date": (employee.hire_date or "")[:10],
            "bank_name": employee.bank_name,
            "account_number": employee.account_number,
            "account_name": employee.account_name,
            "net_salary": cents_to_input(employee.net_salary_cents),
            "paystack_recipient_code": employee.paystack_recipient_code or "",
        }
