"""
Theme customisation store.

The console's colors live here rather than in stylesheets so that a user can
rebrand the console per subsidiary; templates consume them as CSS variables.
"""

import logging
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from stores.base_store import PersistedStore

logger = logging.getLogger(__name__)

HEX_COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$"


class AppTheme(BaseModel):
    """Console color scheme. Serialised with camelCase keys (the CSS variable names)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, validate_assignment=True)

    # Brand colors
    primary: str = Field(default="#8B2F39", pattern=HEX_COLOR_PATTERN)   # burgundy
    secondary: str = Field(default="#2C5F7C", pattern=HEX_COLOR_PATTERN)  # deep blue

    # Sidebar
    sidebar_gradient_start: str = Field(default="#1a1a2e", pattern=HEX_COLOR_PATTERN)
    sidebar_gradient_end: str = Field(default="#16213e", pattern=HEX_COLOR_PATTERN)
    sidebar_text: str = Field(default="#a0aec0", pattern=HEX_COLOR_PATTERN)
    sidebar_text_hover: str = Field(default="#ffffff", pattern=HEX_COLOR_PATTERN)
    sidebar_active_item: str = Field(default="#8B2F39", pattern=HEX_COLOR_PATTERN)

    # Text
    text_main: str = Field(default="#1a202c", pattern=HEX_COLOR_PATTERN)
    text_secondary: str = Field(default="#64748B", pattern=HEX_COLOR_PATTERN)
    text_menu: str = Field(default="#374151", pattern=HEX_COLOR_PATTERN)

    # Backgrounds
    bg_main: str = Field(default="#f8fafc", pattern=HEX_COLOR_PATTERN)
    bg_card: str = Field(default="#ffffff", pattern=HEX_COLOR_PATTERN)
    bg_header: str = Field(default="#ffffff", pattern=HEX_COLOR_PATTERN)

    # Status
    success: str = Field(default="#10B981", pattern=HEX_COLOR_PATTERN)
    warning: str = Field(default="#F59E0B", pattern=HEX_COLOR_PATTERN)
    error: str = Field(default="#EF4444", pattern=HEX_COLOR_PATTERN)
    info: str = Field(default="#2C5F7C", pattern=HEX_COLOR_PATTERN)

    # UI elements
    border: str = Field(default="#e2e8f0", pattern=HEX_COLOR_PATTERN)
    border_radius: int = Field(default=8, ge=0, le=48)

    @field_validator("*", mode="before")
    @classmethod
    def strip_strings(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v


DEFAULT_THEME = AppTheme()

THEME_PRESETS: Dict[str, AppTheme] = {
    "burgundy": DEFAULT_THEME,
    "ocean": DEFAULT_THEME.model_copy(update={
        "primary": "#0284c7",
        "secondary": "#0ea5e9",
        "sidebar_gradient_start": "#0c4a6e",
        "sidebar_gradient_end": "#075985",
        "sidebar_active_item": "#0284c7",
    }),
    "forest": DEFAULT_THEME.model_copy(update={
        "primary": "#059669",
        "secondary": "#10b981",
        "sidebar_gradient_start": "#064e3b",
        "sidebar_gradient_end": "#065f46",
        "sidebar_active_item": "#059669",
    }),
    "sunset": DEFAULT_THEME.model_copy(update={
        "primary": "#dc2626",
        "secondary": "#f97316",
        "sidebar_gradient_start": "#7c2d12",
        "sidebar_gradient_end": "#9a3412",
        "sidebar_active_item": "#dc2626",
    }),
}

# Grouping used by the theme settings page
COLOR_GROUPS: List[Dict[str, Any]] = [
    {"title": "Brand Colors", "colors": [
        ("primary", "Primary Color", "Used for buttons, links, active states"),
        ("secondary", "Secondary Color", "Accent color for secondary actions"),
    ]},
    {"title": "Sidebar Colors", "colors": [
        ("sidebar_gradient_start", "Sidebar Gradient Start", "Top color of sidebar gradient"),
        ("sidebar_gradient_end", "Sidebar Gradient End", "Bottom color of sidebar gradient"),
        ("sidebar_text", "Sidebar Text", "Default menu item text color"),
        ("sidebar_text_hover", "Sidebar Text Hover", "Menu item text color on hover"),
        ("sidebar_active_item", "Active Item Background", "Background for selected menu item"),
    ]},
    {"title": "Text Colors", "colors": [
        ("text_main", "Main Text", "Primary content text color"),
        ("text_secondary", "Secondary Text", "Muted/helper text color"),
        ("text_menu", "Menu Text", "Header menu text color"),
    ]},
    {"title": "Background Colors", "colors": [
        ("bg_main", "Main Background", "Page background color"),
        ("bg_card", "Card Background", "Card/panel background color"),
        ("bg_header", "Header Background", "Top header background color"),
    ]},
    {"title": "Status Colors", "colors": [
        ("success", "Success", "Success states and confirmations"),
        ("warning", "Warning", "Warnings and pending states"),
        ("error", "Error", "Errors and destructive actions"),
        ("info", "Info", "Informational messages"),
    ]},
]


class ThemeStore(PersistedStore):
    """Persisted under "theme-storage"."""

    name = "theme-storage"
    defaults: Dict[str, Any] = {"theme": DEFAULT_THEME.model_dump(by_alias=True)}

    @property
    def theme(self) -> AppTheme:
        stored = self._get("theme") or {}
        try:
            return AppTheme.model_validate(stored)
        except ValueError:
            logger.warning("Stored theme is invalid, falling back to the default theme")
            return DEFAULT_THEME

    def update_theme(self, **changes: Any) -> AppTheme:
        """
        Merge changes into the current theme.

        Raises:
            pydantic.ValidationError: a color is not a hex value
        """
        merged = self.theme.model_dump()
        merged.update(changes)
        theme = AppTheme.model_validate(merged)
        self._set(theme=theme.model_dump(by_alias=True))
        return theme

    def reset_theme(self) -> AppTheme:
        self._set(theme=DEFAULT_THEME.model_dump(by_alias=True))
        return DEFAULT_THEME

    def apply_preset(self, preset_name: str) -> AppTheme:
        """Apply a named preset; unknown names fall back to the default theme."""
        theme = THEME_PRESETS.get(preset_name, DEFAULT_THEME)
        self._set(theme=theme.model_dump(by_alias=True))
        return theme

    def css_variables(self) -> Dict[str, str]:
        """The theme as CSS custom properties; numbers are pixel lengths."""
        variables = {}
        for key, value in self.theme.model_dump(by_alias=True).items():
            variables[f"--{key}"] = f"{value}px" if isinstance(value, (int, float)) else str(value)
        return variables
