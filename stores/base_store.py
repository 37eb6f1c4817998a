"""
Base class for persisted client stores.
"""

import copy
from typing import Any, Dict

from stores.session_store import SessionState


class PersistedStore:
    """
    A named slice of session state with defaults.

    Subclasses set `name` (the storage key) and `defaults`; reads fall back to
    the defaults for keys never written, so adding a field never breaks an
    older persisted session.
    """

    name: str = ""
    defaults: Dict[str, Any] = {}

    def __init__(self, session: SessionState):
        self.session = session

    @property
    def state(self) -> Dict[str, Any]:
        """Current store contents merged over the defaults."""
        stored = self.session.get(self.name) or {}
        merged = copy.deepcopy(self.defaults)
        merged.update(stored)
        return merged

    def _get(self, key: str) -> Any:
        return self.state.get(key)

    def _set(self, **values: Any) -> None:
        current = dict(self.session.get(self.name) or {})
        current.update(values)
        self.session.set(self.name, current)

    def reset(self) -> None:
        """Drop everything this store persisted."""
        self.session.delete(self.name)
