"""
Dashboard summary returned by GET /dashboard/stats.
"""

from pydantic import Field

from models.base import FinManagerModel


class DashboardStats(FinManagerModel):
    """Headline numbers; money values are in cents."""
    wallet_balance: int = Field(default=0, alias="walletBalance")
    pending_invoices: int = Field(default=0, alias="pendingInvoices")
    pending_invoices_total: int = Field(default=0, alias="pendingInvoicesTotal")
    payouts_this_month: int = Field(default=0, alias="payoutsThisMonth")
    payouts_this_month_total: int = Field(default=0, alias="payoutsThisMonthTotal")
    active_employees: int = Field(default=0, alias="activeEmployees")
    subsidiaries_count: int = Field(default=0, alias="subsidiariesCount")
