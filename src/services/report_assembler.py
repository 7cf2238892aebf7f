# src/services/report_assembler.py

"""Build the immutable price report from qualifying listings."""

import logging
from datetime import datetime, timezone

from src.models.listing import Listing
from src.models.report import Report

logger = logging.getLogger("price_report.assembler")


def sort_by_price(listings: list[Listing]) -> tuple[Listing, ...]:
    """Ascending by price; equal prices keep their discovery order."""
    return tuple(sorted(listings, key=lambda listing: listing.price))


def assemble_report(
    listings: list[Listing],
    query: str,
    fetched_at: datetime | None = None,
) -> Report:
    """Sort *listings* and stamp them into a Report.

    An empty input is a valid "no results" report, not an error.
    ``fetched_at`` defaults to the current UTC instant.
    """
    stamp = fetched_at or datetime.now(timezone.utc)
    report = Report(
        query=query,
        fetched_at=stamp,
        products=sort_by_price(listings),
    )
    cheapest = report.cheapest
    if cheapest is None:
        logger.info("Report for '%s' has no qualifying listings", query)
    else:
        logger.info(
            "Report for '%s': %d listings, cheapest %d (%s)",
            query,
            len(report.products),
            cheapest.price,
            cheapest.url,
        )
    return report
