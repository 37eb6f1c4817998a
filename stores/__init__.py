"""
Client-side stores persisted per console session.
"""

from stores.session_store import (
    FileSessionStore,
    SessionState,
    SessionStore,
    create_session_store,
)
from stores.auth_store import AuthStore
from stores.ui_store import ALL_SUBSIDIARIES, UIStore
from stores.theme_store import AppTheme, DEFAULT_THEME, THEME_PRESETS, ThemeStore

__all__ = [
    "ALL_SUBSIDIARIES",
    "AppTheme",
    "AuthStore",
    "DEFAULT_THEME",
    "FileSessionStore",
    "SessionState",
    "SessionStore",
    "THEME_PRESETS",
    "ThemeStore",
    "UIStore",
    "create_session_store",
]
