"""
Invoice create/edit form with its line items.
"""

from datetime import date
from decimal import Decimal
from typing import Any, ClassVar, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from forms.base import ConsoleForm, cents_to_input, parse_amount
from models.documents import Invoice, PaymentTerms
from utils.formatting import to_cents, to_iso_datetime


class LineItemInput(BaseModel):
    """One row of the line item editor; the unit price is in major units."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    description: str = Field(min_length=1)
    quantity: Decimal
    unit_price: Decimal = Field(alias="unitPrice")

    @model_validator(mode="before")
    @classmethod
    def blank_inputs_are_missing(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            return {k: v for k, v in data.items() if not (isinstance(v, str) and v.strip() == "")}
        return data

    @field_validator("quantity", "unit_price", mode="before")
    @classmethod
    def clean_number(cls, v: Any) -> Any:
        return parse_amount(v)

    @field_validator("quantity")
    @classmethod
    def quantity_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("Quantity must be greater than 0")
        return v

    @field_validator("unit_price")
    @classmethod
    def price_not_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Unit price cannot be negative")
        return v

    @property
    def unit_price_cents(self) -> int:
        return to_cents(self.unit_price)

    @property
    def amount_cents(self) -> int:
        return to_cents(self.quantity * self.unit_price)

    def to_payload(self) -> Dict[str, Any]:
        quantity = int(self.quantity) if self.quantity == self.quantity.to_integral_value() else float(self.quantity)
        return {
            "description": self.description,
            "quantity": quantity,
            "unit_price_cents": self.unit_price_cents,
            "amount_cents": self.amount_cents,
        }


def blank_line_item() -> Dict[str, Any]:
    return {"description": "", "quantity": "1", "unitPrice": "0"}


def line_items_from_inputs(data: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """
    Collect line item rows from flat form inputs.

    Rows are posted as lineItems-<n>-description, lineItems-<n>-quantity and
    lineItems-<n>-unitPrice; rows left completely blank are skipped.
    """
    rows: Dict[int, Dict[str, Any]] = {}
    for key, value in data.items():
        if not key.startswith("lineItems-"):
            continue
        parts = key.split("-", 2)
        if len(parts) != 3 or not parts[1].isdigit():
            continue
        rows.setdefault(int(parts[1]), {})[parts[2]] = value
    items = []
    for index in sorted(rows):
        row = rows[index]
        if all(str(v).strip() == "" for v in row.values()):
            continue
        items.append(row)
    return items


class InvoiceForm(ConsoleForm):
    form_name: ClassVar[str] = "invoice"
    required_messages: ClassVar[Dict[str, str]] = {
        "subsidiaryId": "Please select a subsidiary",
        "client_name": "Please enter client name",
        "client_email": "Please enter email",
        "issue_date": "Please select issue date",
        "due_date": "Please select due date",
        "payment_terms": "Please select payment terms",
        "lineItems": "Add at least one line item",
    }
    invalid_messages: ClassVar[Dict[str, str]] = {
        "client_email": "Please enter a valid email",
        "payment_terms": "Please select payment terms",
        "lineItems": "Add at least one line item",
    }

    subsidiary_id: str = Field(alias="subsidiaryId")
    client_name: str
    client_email: EmailStr
    client_address: Optional[str] = None
    issue_date: date
    due_date: date
    payment_terms: PaymentTerms
    notes: Optional[str] = None
    vin_number: Optional[str] = Field(default=None, alias="vinNumber")
    line_items: List[LineItemInput] = Field(alias="lineItems", min_length=1)

    @classmethod
    def from_inputs(cls, data: Mapping[str, Any]) -> 'InvoiceForm':
        """Validate a flat HTML submission (line items as indexed inputs)."""
        values = {k: v for k, v in data.items() if not k.startswith("lineItems-")}
        values["lineItems"] = line_items_from_inputs(data)
        return cls.validate_form(values)

    @property
    def total_cents(self) -> int:
        return sum(item.amount_cents for item in self.line_items)

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload["issue_date"] = to_iso_datetime(self.issue_date)
        payload["due_date"] = to_iso_datetime(self.due_date)
        payload["lineItems"] = [item.to_payload() for item in self.line_items]
        return payload

    @staticmethod
    def initial_values(invoice: Optional[Invoice] = None) -> Dict[str, Any]:
        if invoice is None:
            return {"payment_terms": PaymentTerms.NET_30.value, "lineItems": [blank_line_item()]}
        line_items = [
            {
                "description": li.description,
                "quantity": f"{li.quantity:g}",
                "unitPrice": cents_to_input(li.unit_price_cents),
            }
            for li in invoice.line_items
        ]
        return {
            "subsidiaryId": invoice.subsidiary.id if invoice.subsidiary else "",
            "client_name": invoice.client_name,
            "client_email": invoice.client_email,
            "client_address": invoice.client_address or "",
            "issue_date": (invoice.issue_date or "")[:10],
            "due_date": (invoice.due_date or "")[:10],
            "payment_terms": invoice.payment_terms,
            "notes": invoice.notes or "",
            "lineItems": line_items or [blank_line_item()],
        }
