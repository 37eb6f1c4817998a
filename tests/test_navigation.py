"""
Unit tests for the sidebar menu selection.
"""

import unittest

from console.navigation import MENU, open_group, selected_key


class TestNavigation(unittest.TestCase):

    def test_selected_key(self):
        self.assertEqual(selected_key("/invoices/42/edit"), "/invoices")
        self.assertEqual(selected_key("/employees"), "/employees")
        self.assertEqual(selected_key("/settings/theme"), "/settings/theme")
        self.assertEqual(selected_key("/settings/notifications/1"), "/settings/notifications/1")
        self.assertEqual(selected_key("/"), "/")

    def test_open_group(self):
        self.assertEqual(open_group("/expenses/new"), "divisions")
        self.assertEqual(open_group("/settings/profile"), "app-settings")
        self.assertIsNone(open_group("/dashboard"))
        self.assertIsNone(open_group("/payouts/execute"))

    def test_menu_layout(self):
        self.assertEqual([item.label for item in MENU], ["Dashboard", "Divisions", "App Settings"])
        self.assertEqual([child.label for child in MENU[1].children],
                         ["Subsidiaries", "Invoices", "Employees", "Expenses"])


if __name__ == "__main__":
    unittest.main()
