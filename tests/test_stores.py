"""
Unit tests for the persisted client stores.
"""

import unittest

from pydantic import ValidationError

from stores.auth_store import AuthStore
from stores.session_store import SessionState
from stores.theme_store import DEFAULT_THEME, THEME_PRESETS, ThemeStore
from stores.ui_store import UIStore


class TestAuthStore(unittest.TestCase):

    def setUp(self):
        self.session = SessionState()
        self.store = AuthStore(self.session)

    def test_defaults(self):
        self.assertFalse(self.store.is_authenticated)
        self.assertIsNone(self.store.token)
        self.assertEqual(self.store.username, "Admin")

    def test_login_logout(self):
        self.store.login({"id": "1", "username": "ngozi"}, "jwt")

        self.assertTrue(self.store.is_authenticated)
        self.assertEqual(self.store.username, "ngozi")
        self.assertEqual(self.session.get("auth-storage")["token"], "jwt")

        self.store.logout()
        self.assertFalse(self.store.is_authenticated)
        self.assertIsNone(self.store.user)

    def test_flag_without_token_is_not_authenticated(self):
        self.session.set("auth-storage", {"is_authenticated": True})

        self.assertFalse(self.store.is_authenticated)


class TestUIStore(unittest.TestCase):

    def setUp(self):
        self.session = SessionState()
        self.store = UIStore(self.session)

    def test_sidebar(self):
        self.assertFalse(self.store.sidebar_collapsed)
        self.store.toggle_sidebar()
        self.assertTrue(self.store.sidebar_collapsed)
        self.store.set_sidebar_collapsed(False)
        self.assertFalse(self.store.sidebar_collapsed)

    def test_subsidiary_selection(self):
        self.assertIsNone(self.store.subsidiary_filter())

        self.store.set_current_subsidiary("3")
        self.assertEqual(self.store.subsidiary_filter(), "3")

        self.store.set_current_subsidiary("all")
        self.assertEqual(self.store.current_subsidiary, "all")
        self.assertIsNone(self.store.subsidiary_filter())

        self.store.set_current_subsidiary("")
        self.assertIsNone(self.store.current_subsidiary)

    def test_older_sessions_get_new_defaults(self):
        self.session.set("ui-storage", {"current_subsidiary": "2"})

        self.assertFalse(self.store.sidebar_collapsed)
        self.assertEqual(self.store.current_subsidiary, "2")

    def test_reset(self):
        self.store.toggle_sidebar()
        self.store.reset()

        self.assertIsNone(self.session.get("ui-storage"))


class TestThemeStore(unittest.TestCase):

    def setUp(self):
        self.session = SessionState()
        self.store = ThemeStore(self.session)

    def test_default_theme(self):
        self.assertEqual(self.store.theme, DEFAULT_THEME)
        self.assertEqual(self.store.theme.primary, "#8B2F39")

    def test_update_theme(self):
        theme = self.store.update_theme(primary=" #123456 ", border_radius=12)

        self.assertEqual(theme.primary, "#123456")
        self.assertEqual(self.store.theme.border_radius, 12)
        self.assertEqual(self.session.get("theme-storage")["theme"]["borderRadius"], 12)
        self.assertEqual(self.store.theme.secondary, DEFAULT_THEME.secondary)

    def test_invalid_color_is_rejected(self):
        with self.assertRaises(ValidationError):
            self.store.update_theme(primary="burgundy")

        self.assertEqual(self.store.theme.primary, DEFAULT_THEME.primary)

    def test_presets_and_reset(self):
        theme = self.store.apply_preset("ocean")
        self.assertEqual(theme.primary, "#0284c7")
        self.assertEqual(self.store.theme, THEME_PRESETS["ocean"])

        self.assertEqual(self.store.apply_preset("neon"), DEFAULT_THEME)

        self.store.apply_preset("forest")
        self.store.reset_theme()
        self.assertEqual(self.store.theme, DEFAULT_THEME)

    def test_corrupt_stored_theme_falls_back(self):
        self.session.set("theme-storage", {"theme": {"primary": "not-a-color"}})

        self.assertEqual(self.store.theme, DEFAULT_THEME)

    def test_css_variables(self):
        variables = self.store.css_variables()

        self.assertEqual(variables["--primary"], "#8B2F39")
        self.assertEqual(variables["--sidebarGradientStart"], "#1a1a2e")
        self.assertEqual(variables["--borderRadius"], "8px")


if __name__ == "__main__":
    unittest.main()
