# src/filters/listing_qualifier.py

"""Turn parsed candidates into the qualifying listing set."""

import logging
from dataclasses import dataclass, field

from src.filters.listing_deduplicator import ListingDeduplicator
from src.filters.listing_validator import ListingValidator
from src.models.listing import Listing

logger = logging.getLogger("price_report.filters")


@dataclass
class QualificationResult:
    """Qualifying listings in discovery order plus drop counters."""

    listings: list[Listing] = field(
        default_factory=lambda: list[Listing]()
    )
    invalid_count: int = 0
    duplicate_count: int = 0


class ListingQualifier:
    """Validate then deduplicate; never reorders."""

    @staticmethod
    def qualify(candidates: list[Listing]) -> QualificationResult:
        """Return the qualifying set for *candidates*."""
        valid, invalid = ListingValidator.validate(candidates)
        kept, duplicates = ListingDeduplicator.deduplicate(valid)
        logger.debug(
            "Qualified %d of %d candidates (%d invalid, %d duplicate)",
            len(kept),
            len(candidates),
            invalid,
            duplicates,
        )
        return QualificationResult(
            listings=kept,
            invalid_count=invalid,
            duplicate_count=duplicates,
        )
