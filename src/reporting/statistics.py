# src/reporting/statistics.py

"""Derived market metrics over a report's price-ordered listings.

These are pure functions of ``Report.products`` and are never stored on
the report. Every function assumes ``products`` is already sorted
ascending by price, which the assembler guarantees.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from src.models.listing import Listing
from src.models.report import Report
from src.reporting.formatting import ReportFormatter

_CENTS = Decimal("0.01")


def _round2(value: Decimal) -> float:
    """Round to two places, halves away from zero."""
    return float(value.quantize(_CENTS, rounding=ROUND_HALF_UP))


def average_price(products: Sequence[Listing]) -> float | None:
    """Arithmetic mean of all prices, or ``None`` when empty."""
    if not products:
        return None
    total = sum(Decimal(p.price) for p in products)
    return _round2(total / Decimal(len(products)))


def median_price(products: Sequence[Listing]) -> float | None:
    """Median price; even lengths average the two central prices."""
    count = len(products)
    if not count:
        return None
    middle = count // 2
    if count % 2 == 0:
        pair = Decimal(products[middle - 1].price) + Decimal(
            products[middle].price
        )
        return _round2(pair / 2)
    return float(products[middle].price)


def count_at_or_below(products: Sequence[Listing], threshold: float) -> int:
    """Number of listings priced at or below *threshold* (inclusive)."""
    return sum(1 for p in products if p.price <= threshold)


def highest_listing(products: Sequence[Listing]) -> Listing | None:
    """The most expensive listing, or ``None`` when empty."""
    return products[-1] if products else None


@dataclass
class ReportSummary:
    """Market metrics derived from a single report."""

    total: int
    median: float | None
    average: float | None
    lowest: Listing | None
    highest: Listing | None
    bracket_counts: dict[int, int] = field(
        default_factory=lambda: dict[int, int]()
    )

    @property
    def spread(self) -> int | None:
        """Price difference between the most and least expensive listing."""
        if self.lowest is None or self.highest is None:
            return None
        return self.highest.price - self.lowest.price


def summarize(report: Report, brackets: Sequence[int] = ()) -> ReportSummary:
    """Compute the metrics a consumer renders for *report*."""
    products = report.products
    return ReportSummary(
        total=len(products),
        median=median_price(products),
        average=average_price(products),
        lowest=report.cheapest,
        highest=highest_listing(products),
        bracket_counts={
            threshold: count_at_or_below(products, threshold)
            for threshold in sorted(brackets)
        },
    )


def build_observations(
    summary: ReportSummary, formatter: ReportFormatter,
) -> list[str]:
    """Plain-language insights for the market metrics section."""
    observations: list[str] = []
    cheapest = summary.lowest

    if cheapest is not None and summary.median is not None:
        delta = summary.median - cheapest.price
        if delta > 0:
            observations.append(
                f"Cheapest option is {formatter.currency(cheapest.price)} "
                "which undercuts the median listing by "
                f"{formatter.currency(delta)}."
            )

    if summary.spread is not None:
        observations.append(
            "Price spread from cheapest to most expensive item spans "
            f"{formatter.currency(summary.spread)}."
        )

    previous: int | None = None
    for index, (threshold, count) in enumerate(
        summary.bracket_counts.items()
    ):
        if count and count != previous:
            label = formatter.currency(threshold)
            if index == 0:
                observations.append(
                    f"{count} listing(s) stay within the {label} "
                    "budget bracket."
                )
            else:
                observations.append(
                    f"{count} listing(s) are priced at or below "
                    f"{label} overall."
                )
        previous = count

    if not observations:
        observations.append(
            "Unable to derive insights from the current dataset."
        )
    return observations
