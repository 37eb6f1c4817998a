"""
Sidebar menu and selection rules.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class MenuItem:
    key: str
    label: str
    icon: str = ""
    children: List['MenuItem'] = field(default_factory=list)

    @property
    def is_group(self) -> bool:
        return bool(self.children)


MENU: List[MenuItem] = [
    MenuItem("/dashboard", "Dashboard", "dashboard"),
    MenuItem("divisions", "Divisions", children=[
        MenuItem("/subsidiaries", "Subsidiaries", "shop"),
        MenuItem("/invoices", "Invoices", "file-text"),
        MenuItem("/employees", "Employees", "team"),
        MenuItem("/expenses", "Expenses", "wallet"),
    ]),
    MenuItem("app-settings", "App Settings", children=[
        MenuItem("/settings", "Settings", "setting"),
        MenuItem("/settings/profile", "Profile", "user"),
        MenuItem("/settings/notifications", "Notifications", "notification"),
        MenuItem("/settings/theme", "Theme", "bg-colors"),
    ]),
]


def selected_key(path: str) -> str:
    """
    Menu key highlighted for a request path.

    Settings pages select their full path; everything else selects its first
    path segment, so /invoices/42/edit selects /invoices.
    """
    path = "/" + path.strip("/")
    if path.startswith("/settings"):
        return path
    return "/" + path.split("/")[1] if path != "/" else "/"


def open_group(path: str) -> Optional[str]:
    """Key of the menu group containing the selected item, if any."""
    key = selected_key(path)
    for item in MENU:
        if any(child.key == key for child in item.children):
            return item.key
    return None
