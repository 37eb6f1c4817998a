"""
Unit tests for the display formatting helpers.
"""

import unittest
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from utils.formatting import (
    format_countdown,
    format_currency,
    format_date,
    format_thousands,
    from_cents,
    status_color,
    to_cents,
    to_iso_datetime,
)


class TestCurrency(unittest.TestCase):

    def test_format_currency(self):
        self.assertEqual(format_currency(197500), "₦1,975.00")
        self.assertEqual(format_currency(5), "₦0.05")
        self.assertEqual(format_currency(123456789), "₦1,234,567.89")
        self.assertEqual(format_currency(None), "₦0.00")

    def test_format_thousands(self):
        self.assertEqual(format_thousands(1234567), "1,234,567")
        self.assertEqual(format_thousands("1234.5"), "1,234.5")
        self.assertEqual(format_thousands("1,000"), "1,000")

    def test_to_cents_rounds_half_up(self):
        self.assertEqual(to_cents("1975"), 197500)
        self.assertEqual(to_cents(0.1), 10)
        self.assertEqual(to_cents("1,234.565"), 123457)
        self.assertEqual(to_cents("₦ 10.004"), 1000)
        self.assertEqual(to_cents(Decimal("2.675")), 268)

    def test_to_cents_rejects_text(self):
        with self.assertRaises(ValueError):
            to_cents("ten naira")

    def test_from_cents(self):
        self.assertEqual(from_cents(197550), Decimal("1975.5"))


class TestStatusColor(unittest.TestCase):

    def test_known_statuses(self):
        self.assertEqual(status_color("PAID"), "success")
        self.assertEqual(status_color("paid"), "success")
        self.assertEqual(status_color("OVERDUE"), "error")
        self.assertEqual(status_color("PENDING"), "warning")
        self.assertEqual(status_color("SENT"), "processing")

    def test_unknown_status_is_neutral(self):
        self.assertEqual(status_color("ARCHIVED"), "default")
        self.assertEqual(status_color(None), "default")


class TestDates(unittest.TestCase):

    def test_format_date(self):
        self.assertEqual(format_date("2025-01-15T10:30:00.000Z"), "Jan 15, 2025")
        self.assertEqual(format_date(date(2025, 3, 2)), "Mar 02, 2025")
        self.assertEqual(format_date(None), "-")
        self.assertEqual(format_date(""), "-")
        # Unparseable values are shown as received
        self.assertEqual(format_date("soon"), "soon")

    def test_to_iso_datetime(self):
        self.assertEqual(to_iso_datetime(date(2025, 1, 15)), "2025-01-15T00:00:00.000Z")
        self.assertEqual(to_iso_datetime(datetime(2025, 1, 15, 9, 5, 7, 250000)),
                         "2025-01-15T09:05:07.250Z")

        lagos = timezone(timedelta(hours=1))
        self.assertEqual(to_iso_datetime(datetime(2025, 1, 15, 0, 30, tzinfo=lagos)),
                         "2025-01-14T23:30:00.000Z")

    def test_format_countdown(self):
        self.assertEqual(format_countdown(300), "5:00")
        self.assertEqual(format_countdown(61), "1:01")
        self.assertEqual(format_countdown(-4), "0:00")


if __name__ == "__main__":
    unittest.main()
