# tests/test_formatting.py

"""Tests for ReportFormatter display strings."""

import unittest
from datetime import datetime, timezone

from src.reporting.formatting import ReportFormatter


class TestReportFormatter(unittest.TestCase):
    """ReportFormatter behaviour with default BDT settings."""

    def setUp(self) -> None:
        self.fmt = ReportFormatter()

    def test_currency(self) -> None:
        """Whole taka with thousands separators."""
        self.assertEqual(self.fmt.currency(1299), "৳1,299")
        self.assertEqual(self.fmt.currency(249.5), "৳250")
        self.assertEqual(self.fmt.currency(0), "৳0")
        self.assertEqual(self.fmt.currency(None), "Unavailable")

    def test_custom_symbol(self) -> None:
        """The currency symbol is injectable."""
        fmt = ReportFormatter(currency_symbol="Tk ")
        self.assertEqual(fmt.currency(12500), "Tk 12,500")

    def test_rating(self) -> None:
        """One decimal place or N/A."""
        self.assertEqual(self.fmt.rating(4.545), "4.5")
        self.assertEqual(self.fmt.rating(5.0), "5.0")
        self.assertEqual(self.fmt.rating(None), "N/A")

    def test_count_and_reviews(self) -> None:
        """Counts get separators; zero reviews read as none."""
        self.assertEqual(self.fmt.count(1024), "1,024")
        self.assertEqual(self.fmt.count(None), "N/A")
        self.assertEqual(self.fmt.reviews(12), "12 review(s)")
        self.assertEqual(self.fmt.reviews(0), "No reviews")
        self.assertEqual(self.fmt.reviews(None), "No reviews")

    def test_timestamp_in_dhaka(self) -> None:
        """UTC instants render in Asia/Dhaka (UTC+6)."""
        stamp = datetime(2026, 10, 5, 8, 5, tzinfo=timezone.utc)
        self.assertEqual(self.fmt.timestamp(stamp), "5 Oct 2026, 14:05")

    def test_naive_timestamp_treated_as_utc(self) -> None:
        """Naive datetimes are assumed to be UTC."""
        stamp = datetime(2026, 10, 19, 20, 30)
        self.assertEqual(self.fmt.timestamp(stamp), "20 Oct 2026, 02:30")


if __name__ == "__main__":
    unittest.main()
