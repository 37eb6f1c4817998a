"""
Data models for financial documents: invoices and expense claims.
"""

from enum import Enum
from typing import List, Optional

from pydantic import Field

from models.base import EmployeeRef, FinManagerModel, SubsidiaryRef


class InvoiceStatus(str, Enum):
    """Lifecycle status of an invoice."""
    DRAFT = "DRAFT"
    SENT = "SENT"
    PAID = "PAID"
    OVERDUE = "OVERDUE"
    CANCELLED = "CANCELLED"


class PaymentTerms(str, Enum):
    """Payment terms offered on the invoice form."""
    SEVEN_DAYS = "7 Days"
    NET_30 = "Net 30"
    NET_60 = "Net 60"


class ExpenseStatus(str, Enum):
    """Status of an expense claim."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REIMBURSED = "REIMBURSED"
    REJECTED = "REJECTED"


class ExpenseCategory(str, Enum):
    """Expense categories."""
    TRAVEL = "TRAVEL"
    MEALS = "MEALS"
    SUPPLIES = "SUPPLIES"
    OTHER = "OTHER"


class InvoiceLineItem(FinManagerModel):
    """Line item on an invoice."""
    id: Optional[str] = None
    description: str = ""
    quantity: float = 1
    unit_price_cents: int = 0
    amount_cents: int = 0


class Invoice(FinManagerModel):
    """Invoice issued by a subsidiary."""
    id: str
    invoice_number: str = ""
    subsidiary: Optional[SubsidiaryRef] = None

    # Client
    client_name: str = ""
    client_email: str = ""
    client_address: Optional[str] = None

    # Amounts
    total_cents: int = 0
    balance_due_cents: int = 0

    status: InvoiceStatus = InvoiceStatus.DRAFT
    issue_date: Optional[str] = None
    due_date: Optional[str] = None
    payment_terms: str = ""
    notes: Optional[str] = None
    pdf_storage_url: Optional[str] = None
    line_items: List[InvoiceLineItem] = Field(default_factory=list, alias="lineItems")
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def can_send(self) -> bool:
        return self.status == InvoiceStatus.DRAFT

    @property
    def has_pdf(self) -> bool:
        return bool(self.pdf_storage_url)


class Expense(FinManagerModel):
    """Expense claim submitted for an employee."""
    id: str
    employee: Optional[EmployeeRef] = None
    subsidiary: Optional[SubsidiaryRef] = None
    expense_date: Optional[str] = None
    amount_cents: int = 0
    category: str = ExpenseCategory.OTHER.value
    description: str = ""
    status: ExpenseStatus = ExpenseStatus.PENDING
    approved_at: Optional[str] = None
    reimbursed_at: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None

    @property
    def employee_name(self) -> str:
        return self.employee.full_name if self.employee else ""

    # Affordances only; the API decides whether a transition is allowed
    @property
    def can_approve(self) -> bool:
        return self.status == ExpenseStatus.PENDING

    @property
    def can_reject(self) -> bool:
        return self.status == ExpenseStatus.PENDING

    @property
    def can_reimburse(self) -> bool:
        return self.status == ExpenseStatus.APPROVED
