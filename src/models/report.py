# src/models/report.py

"""Immutable price report produced by one pipeline run."""

from dataclasses import dataclass
from datetime import datetime

from src.models.listing import Listing


@dataclass(frozen=True)
class Report:
    """Price-ordered qualifying listings for a single query.

    ``products`` is sorted ascending by price with ties kept in
    discovery order. ``cheapest`` is derived from it rather than
    stored, so it is always the very object at ``products[0]``.
    """

    query: str
    fetched_at: datetime
    products: tuple[Listing, ...] = ()

    @property
    def cheapest(self) -> Listing | None:
        """Return the headline listing, or ``None`` for an empty report."""
        return self.products[0] if self.products else None

    @property
    def is_empty(self) -> bool:
        """True when no listing qualified."""
        return not self.products
