# src/parsers/listing_parser.py

"""Tolerant conversion of raw Daraz listing blocks into Listings.

Every field has its own extractor. An extractor that cannot read its
field returns ``None`` and only that field is lost; a record is dropped
only when one of the required extractors (name, price, url) fails.
"""

import logging
import math
import re
from collections.abc import Iterable, Mapping
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, cast
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from src.config.settings import Settings
from src.models.listing import Listing

logger = logging.getLogger("price_report.parser")

# Candidate keys per field, in order of preference
NAME_KEYS = ("name", "title")
PRICE_KEYS = ("price", "priceShow", "salePrice")
URL_KEYS = ("productUrl", "itemUrl")
SELLER_KEYS = ("sellerName", "seller")
LOCATION_KEYS = ("location",)
RATING_KEYS = ("ratingScore", "rating")
REVIEW_KEYS = ("review", "reviewCount")
SOLD_KEYS = ("itemSoldCntShow", "sold")
SPONSORED_KEYS = ("isSponsored", "sponsored", "isAD")
DESCRIPTION_KEYS = ("description",)

_CURRENCY_RE = re.compile(r"(৳|tk\.?|bdt)", re.IGNORECASE)
_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")
_EXPONENT_RE = re.compile(r"\d[eE][+-]?\d")
_TRUTHY = {"1", "true", "yes", "y"}

MAX_RATING = 5.0


def _first_present(block: Mapping[str, Any], keys: Iterable[str]) -> list[Any]:
    """Values for *keys* that are present and not null, in key order."""
    return [
        block[key]
        for key in keys
        if key in block and block[key] is not None
    ]


def clean_text(value: Any) -> str | None:
    """Strip markup and collapse whitespace; ``None`` if nothing remains."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str):
        return None
    text = value
    if "<" in text or "&" in text:
        text = BeautifulSoup(text, "lxml").get_text(" ")
    collapsed = " ".join(text.split())
    return collapsed or None


def parse_price(value: Any) -> int | None:
    """Parse an upstream price into a positive whole-taka amount.

    Accepts numbers and strings such as ``"৳ 1,299"`` or ``"Tk. 349.50"``.
    Fractions are rounded half-up; a result of zero or below counts as
    unparsable. Strings in exponent notation are rejected.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        # repr keeps the full float value, exponent included
        amount = Decimal(repr(value))
    elif isinstance(value, str):
        raw = _CURRENCY_RE.sub("", value).replace(",", "")
        if _EXPONENT_RE.search(raw):
            return None
        match = _NUMBER_RE.search(raw)
        if not match:
            return None
        try:
            amount = Decimal(match.group(0))
        except InvalidOperation:
            return None
    else:
        return None

    amount = amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    if amount <= 0:
        return None
    return int(amount)


def parse_url(value: Any, base_url: str | None = None) -> str | None:
    """Resolve a listing link into an absolute http(s) URL."""
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text or any(ch.isspace() for ch in text):
        return None
    base = (base_url or Settings.BASE_URL).rstrip("/") + "/"
    if text.startswith("//"):
        absolute = f"https:{text}"
    else:
        absolute = urljoin(base, text)
    parsed = urlparse(absolute)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return absolute


def parse_rating(value: Any) -> float | None:
    """Parse a star rating; values outside [0, 5] are treated as absent."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        rating = float(str(value).strip())
    except ValueError:
        return None
    if not math.isfinite(rating) or not 0.0 <= rating <= MAX_RATING:
        return None
    return rating


def parse_review_count(value: Any) -> int | None:
    """Parse a non-negative review count such as ``12`` or ``"1,024"``."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float):
        if not value.is_integer() or value < 0:
            return None
        return int(value)
    if not isinstance(value, str):
        return None
    text = value.replace(",", "").strip()
    if not text.isdigit():
        return None
    return int(text)


def parse_sponsored(value: Any) -> bool:
    """Interpret upstream sponsored flags (bools, ``1`` or ``"true"``)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return False


def parse_description(value: Any) -> tuple[str, ...]:
    """Return cleaned description bullets in their original order."""
    if value is None:
        return ()
    if isinstance(value, str):
        items: list[Any] = [value]
    elif isinstance(value, list):
        items = cast(list[Any], value)
    else:
        return ()
    bullets: list[str] = []
    for item in items:
        text = clean_text(item)
        if text:
            bullets.append(text)
    return tuple(bullets)


# --- Per-field extractors ---------------------------------------------------


def extract_name(block: Mapping[str, Any]) -> str | None:
    for value in _first_present(block, NAME_KEYS):
        name = clean_text(value)
        if name:
            return name
    return None


def extract_price(block: Mapping[str, Any]) -> int | None:
    for value in _first_present(block, PRICE_KEYS):
        price = parse_price(value)
        if price is not None:
            return price
    return None


def extract_url(
    block: Mapping[str, Any], base_url: str | None = None,
) -> str | None:
    for value in _first_present(block, URL_KEYS):
        url = parse_url(value, base_url)
        if url:
            return url
    return None


def extract_seller(block: Mapping[str, Any]) -> str | None:
    for value in _first_present(block, SELLER_KEYS):
        seller = clean_text(value)
        if seller:
            return seller
    return None


def extract_location(block: Mapping[str, Any]) -> str | None:
    for value in _first_present(block, LOCATION_KEYS):
        location = clean_text(value)
        if location:
            return location
    return None


def extract_rating(block: Mapping[str, Any]) -> float | None:
    for value in _first_present(block, RATING_KEYS):
        rating = parse_rating(value)
        if rating is not None:
            return rating
    return None


def extract_review_count(block: Mapping[str, Any]) -> int | None:
    for value in _first_present(block, REVIEW_KEYS):
        count = parse_review_count(value)
        if count is not None:
            return count
    return None


def extract_sold(block: Mapping[str, Any]) -> str | None:
    for value in _first_present(block, SOLD_KEYS):
        sold = clean_text(value)
        if sold:
            return sold
    return None


def extract_sponsored(block: Mapping[str, Any]) -> bool:
    return any(
        parse_sponsored(value)
        for value in _first_present(block, SPONSORED_KEYS)
    )


def extract_description(block: Mapping[str, Any]) -> tuple[str, ...]:
    for value in _first_present(block, DESCRIPTION_KEYS):
        bullets = parse_description(value)
        if bullets:
            return bullets
    return ()


# --- Record builder ---------------------------------------------------------


def parse_listing(
    block: Any, base_url: str | None = None,
) -> Listing | None:
    """Build a Listing from one raw block, or ``None`` if it is malformed."""
    if not isinstance(block, Mapping):
        logger.debug(
            "Dropped non-mapping listing block (%s)", type(block).__name__,
        )
        return None
    record = cast(Mapping[str, Any], block)

    name = extract_name(record)
    price = extract_price(record)
    url = extract_url(record, base_url)
    if name is None or price is None or url is None:
        logger.debug(
            "Dropped malformed listing (name=%r, price=%r, url=%r)",
            name,
            price,
            url,
        )
        return None

    return Listing(
        name=name,
        price=price,
        url=url,
        seller=extract_seller(record),
        location=extract_location(record),
        rating=extract_rating(record),
        review_count=extract_review_count(record),
        sold=extract_sold(record),
        sponsored=extract_sponsored(record),
        description=extract_description(record),
    )


def parse_listings(
    blocks: Iterable[Any], base_url: str | None = None,
) -> list[Listing]:
    """Parse a batch of raw blocks, skipping malformed ones."""
    listings: list[Listing] = []
    malformed = 0
    for block in blocks:
        listing = parse_listing(block, base_url)
        if listing is None:
            malformed += 1
            continue
        listings.append(listing)

    if malformed:
        logger.info("Parser dropped %d malformed listing blocks", malformed)

    return listings
