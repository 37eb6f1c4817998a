"""Expenses resource."""

from typing import Any, Dict, Optional

from api.base_service import ResourceService
from models.documents import Expense


class ExpenseService(ResourceService[Expense]):
    path = "/expenses"
    list_key = "expenses"
    item_key = "expense"
    model = Expense

    def create(self, payload: Dict[str, Any]) -> Optional[Expense]:
        return self._create(payload)

    def approve(self, expense_id: str) -> Optional[Expense]:
        return self._action(expense_id, "approve")

    def reject(self, expense_id: str) -> Optional[Expense]:
        return self._action(expense_id, "reject")

    def reimburse(self, expense_id: str) -> Optional[Expense]:
        return self._action(expense_id, "reimburse")
