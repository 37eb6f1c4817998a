"""
Expense claim form.
"""

from datetime import date
from decimal import Decimal
from typing import Any, ClassVar, Dict

from pydantic import Field, field_validator

from forms.base import ConsoleForm, parse_amount
from models.documents import ExpenseCategory
from utils.formatting import to_cents, to_iso_datetime

MAX_DESCRIPTION_LENGTH = 500


class ExpenseForm(ConsoleForm):
    form_name: ClassVar[str] = "expense"
    required_messages: ClassVar[Dict[str, str]] = {
        "employeeId": "Please select an employee",
        "subsidiaryId": "Please select a subsidiary",
        "expense_date": "Please select date",
        "category": "Please select a category",
        "amount": "Please enter amount",
        "description": "Please enter description",
    }
    invalid_messages: ClassVar[Dict[str, str]] = {
        "category": "Please select a category",
        "expense_date": "Please select date",
    }

    employee_id: str = Field(alias="employeeId")
    subsidiary_id: str = Field(alias="subsidiaryId")
    expense_date: date = Field(default_factory=date.today)
    category: ExpenseCategory
    amount: Decimal
    description: str = Field(max_length=MAX_DESCRIPTION_LENGTH)

    @field_validator("amount", mode="before")
    @classmethod
    def clean_amount(cls, v: Any) -> Any:
        return parse_amount(v)

    @field_validator("amount")
    @classmethod
    def amount_positive(cls, v: Decimal) -> Decimal:
        if v < 1:
            raise ValueError("Amount must be greater than 0")
        return v

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload.pop("amount", None)
        payload["amount_cents"] = to_cents(self.amount)
        payload["expense_date"] = to_iso_datetime(self.expense_date)
        return payload

    @staticmethod
    def initial_values() -> Dict[str, Any]:
        return {"expense_date": date.today().isoformat()}
