"""Subsidiaries resource."""

from typing import Optional

from api.base_service import CrudService
from models.entities import Subsidiary


class SubsidiaryService(CrudService[Subsidiary]):
    path = "/subsidiaries"
    list_key = "subsidiaries"
    item_key = "subsidiary"
    model = Subsidiary

    def toggle_status(self, subsidiary_id: str, is_active: bool) -> Optional[Subsidiary]:
        """Activate or deactivate a subsidiary."""
        return self._update(subsidiary_id, {"is_active": bool(is_active)})
