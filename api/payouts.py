"""Payouts resource."""

from typing import Optional

from api.base_service import ResourceService
from models.payouts import Payout


class PayoutService(ResourceService[Payout]):
    path = "/payouts"
    list_key = "payouts"
    item_key = "payout"
    model = Payout

    def retry(self, payout_id: str) -> Optional[Payout]:
        """Queue a failed payout for another transfer attempt."""
        return self._action(payout_id, "retry")
