"""Invoices resource."""

from typing import Optional

from api.base_service import CrudService
from models.documents import Invoice


class InvoiceService(CrudService[Invoice]):
    path = "/invoices"
    list_key = "invoices"
    item_key = "invoice"
    model = Invoice

    def send(self, invoice_id: str) -> Optional[Invoice]:
        """Email the invoice to its client (POST /invoices/{id}/send)."""
        return self._action(invoice_id, "send")
