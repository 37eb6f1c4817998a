"""
Payout records tracked by the console and executed by the backend.
"""

from enum import Enum
from typing import Optional

from models.base import EmployeeRef, FinManagerModel, SubsidiaryRef


class PayoutStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class PayoutType(str, Enum):
    SALARY = "SALARY"
    BONUS = "BONUS"
    REIMBURSEMENT = "REIMBURSEMENT"


class Payout(FinManagerModel):
    """Salary, bonus or reimbursement disbursement."""
    id: str
    employee: Optional[EmployeeRef] = None
    subsidiary: Optional[SubsidiaryRef] = None
    payout_date: Optional[str] = None
    amount_cents: int = 0
    payout_type: PayoutType = PayoutType.SALARY
    paystack_transfer_code: Optional[str] = None
    paystack_status: Optional[str] = None
    status: PayoutStatus = PayoutStatus.PENDING
    notes: Optional[str] = None
    failure_reason: Optional[str] = None
    created_at: Optional[str] = None
    completed_at: Optional[str] = None

    @property
    def employee_name(self) -> str:
        return self.employee.full_name if self.employee else ""

    @property
    def can_retry(self) -> bool:
        return self.status == PayoutStatus.FAILED
