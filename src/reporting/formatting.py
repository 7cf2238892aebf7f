# src/reporting/formatting.py

"""Locale formatting for rendering a report.

The report itself carries raw numbers and a UTC timestamp; a
:class:`ReportFormatter` is handed to whichever renderer needs display
strings.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from zoneinfo import ZoneInfo

from src.config.settings import Settings


@dataclass(frozen=True)
class ReportFormatter:
    """Currency, rating, count and timestamp formatting for one locale."""

    currency_symbol: str = Settings.CURRENCY_SYMBOL
    timezone_name: str = Settings.DISPLAY_TIMEZONE
    unavailable: str = "Unavailable"
    not_available: str = "N/A"

    def currency(self, value: float | None) -> str:
        """Whole-unit amount with thousands separators, e.g. ``৳1,299``."""
        if value is None:
            return self.unavailable
        rounded = Decimal(str(value)).quantize(
            Decimal("1"), rounding=ROUND_HALF_UP
        )
        sign = "-" if rounded < 0 else ""
        return f"{sign}{self.currency_symbol}{abs(int(rounded)):,}"

    def rating(self, value: float | None) -> str:
        if value is None:
            return self.not_available
        return f"{value:.1f}"

    def count(self, value: int | None) -> str:
        if value is None:
            return self.not_available
        return f"{value:,}"

    def reviews(self, value: int | None) -> str:
        """Review line for a listing card ("No reviews" when zero/absent)."""
        if not value:
            return "No reviews"
        return f"{value:,} review(s)"

    def timestamp(self, value: datetime) -> str:
        """Local date and time, e.g. ``19 Oct 2026, 14:05``."""
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        local = value.astimezone(ZoneInfo(self.timezone_name))
        return f"{local.day} {local:%b %Y, %H:%M}"
