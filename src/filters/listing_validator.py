# src/filters/listing_validator.py

"""Listing validation: drop candidates missing a required field."""

import logging

from src.models.listing import Listing

logger = logging.getLogger("price_report.filters")


class ListingValidator:
    """Validate listings and drop those with missing essential fields."""

    @staticmethod
    def is_valid(listing: Listing) -> bool:
        """True when name, url and a positive price are all present."""
        return bool(
            listing.name
            and listing.name.strip()
            and listing.url
            and listing.url.strip()
            and not isinstance(listing.price, bool)
            and isinstance(listing.price, int)
            and listing.price > 0
        )

    @staticmethod
    def validate(
        listings: list[Listing],
    ) -> tuple[list[Listing], int]:
        """Drop listings with empty names, empty URLs or non-positive prices.

        Returns the valid listings and the count of dropped items.
        """
        valid: list[Listing] = []
        dropped = 0

        for listing in listings:
            if not ListingValidator.is_valid(listing):
                logger.debug(
                    "Dropped invalid listing (name=%r, price=%r, url=%r)",
                    listing.name,
                    listing.price,
                    listing.url,
                )
                dropped += 1
                continue
            valid.append(listing)

        if dropped:
            logger.info(
                "Validation dropped %d invalid listings",
                dropped,
            )

        return valid, dropped
