# src/models/listing.py

"""Normalised marketplace listing model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Listing:
    """A single qualifying Daraz search result.

    ``price`` is in whole taka. Optional fields use ``None`` for
    "not available"; ``description`` keeps the upstream bullet order.
    """

    name: str
    price: int
    url: str
    seller: str | None = None
    location: str | None = None
    rating: float | None = None
    review_count: int | None = None
    sold: str | None = None
    sponsored: bool = False
    description: tuple[str, ...] = ()
