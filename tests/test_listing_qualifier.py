# tests/test_listing_qualifier.py

"""Tests for ListingQualifier (validate + deduplicate)."""

import unittest

from src.filters.listing_qualifier import ListingQualifier, QualificationResult
from src.models.listing import Listing


def _make(name: str, price: int, url: str) -> Listing:
    """Create a minimal Listing."""
    return Listing(name=name, price=price, url=url)


class TestListingQualifier(unittest.TestCase):
    """ListingQualifier.qualify behaviour."""

    def test_returns_result_with_counts(self) -> None:
        """Invalid and duplicate candidates are counted separately."""
        candidates = [
            _make("A", 300, "https://d.test/p/1"),
            _make("", 200, "https://d.test/p/2"),
            _make("B", 100, "https://d.test/p/3"),
            _make("A dup", 50, "https://d.test/p/1"),
        ]
        result = ListingQualifier.qualify(candidates)

        self.assertIsInstance(result, QualificationResult)
        self.assertEqual([item.name for item in result.listings], ["A", "B"])
        self.assertEqual(result.invalid_count, 1)
        self.assertEqual(result.duplicate_count, 1)

    def test_discovery_order_preserved(self) -> None:
        """The qualifier never sorts by price."""
        candidates = [
            _make("Expensive", 900, "https://d.test/p/1"),
            _make("Cheap", 100, "https://d.test/p/2"),
        ]
        result = ListingQualifier.qualify(candidates)
        self.assertEqual(
            [item.name for item in result.listings], ["Expensive", "Cheap"]
        )

    def test_invalid_duplicate_does_not_block_valid_one(self) -> None:
        """Validation runs before dedup, so a bad first copy is ignored."""
        candidates = [
            _make("Bad", 0, "https://d.test/p/1"),
            _make("Good", 150, "https://d.test/p/1"),
        ]
        result = ListingQualifier.qualify(candidates)
        self.assertEqual([item.name for item in result.listings], ["Good"])

    def test_empty(self) -> None:
        """No candidates, empty result."""
        result = ListingQualifier.qualify([])
        self.assertEqual(result.listings, [])
        self.assertEqual(result.invalid_count, 0)
        self.assertEqual(result.duplicate_count, 0)


if __name__ == "__main__":
    unittest.main()
