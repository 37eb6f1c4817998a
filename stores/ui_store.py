"""
UI preferences: sidebar state and the subsidiary picked in the header.
"""

from typing import Any, Dict, Optional

from stores.base_store import PersistedStore

ALL_SUBSIDIARIES = "all"


class UIStore(PersistedStore):
    """Persisted under "ui-storage"."""

    name = "ui-storage"
    defaults: Dict[str, Any] = {
        "sidebar_collapsed": False,
        "current_subsidiary": None,
    }

    @property
    def sidebar_collapsed(self) -> bool:
        return bool(self._get("sidebar_collapsed"))

    @property
    def current_subsidiary(self) -> Optional[str]:
        return self._get("current_subsidiary")

    def toggle_sidebar(self) -> None:
        self._set(sidebar_collapsed=not self.sidebar_collapsed)

    def set_sidebar_collapsed(self, collapsed: bool) -> None:
        self._set(sidebar_collapsed=bool(collapsed))

    def set_current_subsidiary(self, subsidiary_id: Optional[str]) -> None:
        self._set(current_subsidiary=subsidiary_id or None)

    def subsidiary_filter(self) -> Optional[str]:
        """The header selection as a list filter; "all" means no filter."""
        current = self.current_subsidiary
        if not current or current == ALL_SUBSIDIARIES:
            return None
        return current
