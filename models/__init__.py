"""
Data models for the FinManager console.
"""

from models.base import EmployeeRef, FinManagerModel, Page, SubsidiaryRef
from models.dashboard import DashboardStats
from models.documents import (
    Expense,
    ExpenseCategory,
    ExpenseStatus,
    Invoice,
    InvoiceLineItem,
    InvoiceStatus,
    PaymentTerms,
)
from models.entities import (
    Employee,
    EmploymentStatus,
    InvoiceTemplate,
    Subsidiary,
    User,
    UserProfile,
)
from models.payouts import Payout, PayoutStatus, PayoutType
from models.settings import NotificationChannel, NotificationTemplate
