# src/filters/listing_deduplicator.py

"""Listing deduplication across overlapping search pages."""

import logging
import re

from src.models.listing import Listing

logger = logging.getLogger("price_report.filters")


class ListingDeduplicator:
    """Remove repeated listings, keyed by normalised URL."""

    # Tracking params and fragments don't affect listing identity
    _STRIP_PARAMS_RE = re.compile(
        r"[?#].*$"
    )

    @staticmethod
    def normalise_url(url: str) -> str:
        """Normalise a listing URL for dedup comparison.

        Strips query parameters, fragments, trailing slashes,
        and lowercases the result.
        """
        if not url:
            return ""
        cleaned = ListingDeduplicator._STRIP_PARAMS_RE.sub(
            "", url.strip()
        )
        return cleaned.rstrip("/").lower()

    @staticmethod
    def deduplicate(
        listings: list[Listing],
    ) -> tuple[list[Listing], int]:
        """Keep the first-seen listing per URL, preserving input order.

        Returns the deduplicated list and the count of removed dupes.
        """
        seen: dict[str, Listing] = {}
        removed = 0

        for listing in listings:
            key = ListingDeduplicator.normalise_url(listing.url)
            if key in seen:
                removed += 1
                continue
            seen[key] = listing

        if removed:
            logger.info(
                "Deduplication removed %d duplicate listings",
                removed,
            )

        return list(seen.values()), removed
