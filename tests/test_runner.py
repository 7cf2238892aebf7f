# tests/test_runner.py

"""Tests for the headless CLI runner."""

import io
import json
import unittest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

from rich.console import Console

from src.cli.runner import cli_report, render_report, report_to_dict
from src.models.listing import Listing
from src.models.report import Report
from src.scrapers.exceptions import FetchFailure

PIPELINE_PATH = "src.cli.runner.ReportPipeline"

_STAMP = datetime(2026, 10, 19, 8, 5, tzinfo=timezone.utc)


def _report(*listings: Listing) -> Report:
    """A report over already-sorted listings."""
    return Report(query="ice roller", fetched_at=_STAMP, products=listings)


CHEAP = Listing(
    name="Mini Ice Roller [Blue]",
    price=199,
    url="https://www.daraz.com.bd/products/mini-i300.html",
    seller="Cool Beauty",
    location="Dhaka",
    rating=4.5,
    review_count=1024,
    sold="1.2K sold",
    sponsored=True,
    description=tuple(f"Bullet {n}" for n in range(1, 9)),
)
PRICEY = Listing(
    name="Jade Ice Roller Large",
    price=1299,
    url="https://www.daraz.com.bd/products/jade-i200.html",
)


def _stub_pipeline(mock_cls: MagicMock, **build: object) -> MagicMock:
    """Configure the patched ReportPipeline class."""
    pipeline = mock_cls.return_value
    pipeline.query = "ice roller"
    pipeline.pages = 1
    pipeline.build_report = AsyncMock(**build)
    return pipeline


class TestReportToDict(unittest.TestCase):
    """JSON serialisation of a report."""

    def test_full_report(self) -> None:
        """Listings, cheapest and stats are serialised."""
        data = report_to_dict(_report(CHEAP, PRICEY))

        self.assertEqual(data["query"], "ice roller")
        self.assertEqual(data["fetchedAt"], "2026-10-19T08:05:00+00:00")
        self.assertEqual(data["currency"], "BDT")
        products = data["products"]
        assert isinstance(products, list)
        self.assertEqual(len(products), 2)
        cheapest = data["cheapest"]
        assert isinstance(cheapest, dict)
        self.assertEqual(cheapest["price"], 199)
        self.assertEqual(cheapest["reviewCount"], 1024)
        self.assertTrue(cheapest["sponsored"])
        self.assertEqual(
            data["stats"],
            {
                "total": 2,
                "median": 749.0,
                "average": 749.0,
                "highest": 1299,
                "atOrBelow": {"200": 1, "500": 1},
            },
        )
        json.dumps(data, ensure_ascii=False)

    def test_empty_report(self) -> None:
        """An empty report serialises with null metrics."""
        data = report_to_dict(_report())
        self.assertIsNone(data["cheapest"])
        self.assertEqual(data["products"], [])
        stats = data["stats"]
        assert isinstance(stats, dict)
        self.assertIsNone(stats["median"])
        self.assertIsNone(stats["average"])
        self.assertIsNone(stats["highest"])


class TestRenderReport(unittest.TestCase):
    """Rich rendering of a report."""

    def _render(self, report: Report, limit: int | None = None) -> str:
        buffer = io.StringIO()
        console = Console(file=buffer, width=200, color_system=None)
        render_report(report, console, limit=limit)
        return buffer.getvalue()

    def test_sections_rendered(self) -> None:
        """Headline, metrics, listings and highlights all appear."""
        output = self._render(_report(CHEAP, PRICEY))

        self.assertIn("Daraz Price Report: ice roller", output)
        self.assertIn("Snapshot generated: 19 Oct 2026, 14:05", output)
        self.assertIn("Mini Ice Roller [Blue]", output)
        self.assertIn("৳1,299", output)
        self.assertIn("Sponsored", output)
        self.assertIn("Cheapest Item Highlights", output)
        self.assertIn("Bullet 6", output)
        self.assertNotIn("Bullet 7", output)
        self.assertIn("Unknown", output)

    def test_empty_report(self) -> None:
        """The no-results state is rendered, not raised."""
        output = self._render(_report())

        self.assertIn("Could not identify any qualifying listings", output)
        self.assertIn("No matching listings found.", output)
        self.assertIn("Unable to derive insights", output)
        self.assertNotIn("Cheapest Item Highlights", output)

    def test_limit_rows(self) -> None:
        """--limit trims the listings table only."""
        output = self._render(_report(CHEAP, PRICEY), limit=1)
        self.assertNotIn("Jade Ice Roller Large", output)
        self.assertIn("Highest price observed", output)


class TestCliReport(unittest.IsolatedAsyncioTestCase):
    """cli_report exit codes and output modes."""

    @patch(PIPELINE_PATH)
    async def test_json_output(self, mock_cls: MagicMock) -> None:
        """JSON mode prints the serialised report and exits 0."""
        _stub_pipeline(mock_cls, return_value=_report(CHEAP))

        with patch("sys.stdout", new_callable=io.StringIO) as stdout:
            code = await cli_report("ice roller", 1, "json")

        self.assertEqual(code, 0)
        payload = json.loads(stdout.getvalue())
        self.assertEqual(payload["cheapest"]["name"], "Mini Ice Roller [Blue]")
        mock_cls.assert_called_once_with(query="ice roller", pages=1)

    @patch(PIPELINE_PATH)
    async def test_empty_report_is_success(self, mock_cls: MagicMock) -> None:
        """No qualifying listings is still a produced report."""
        _stub_pipeline(mock_cls, return_value=_report())

        with patch("sys.stdout", new_callable=io.StringIO):
            code = await cli_report(None, None, "table")

        self.assertEqual(code, 0)

    @patch(PIPELINE_PATH)
    async def test_fetch_failure_exit_code(self, mock_cls: MagicMock) -> None:
        """A fetch failure exits 1 without printing a report."""
        _stub_pipeline(
            mock_cls,
            side_effect=FetchFailure("HTTP 503", url="u", status_code=503),
        )

        with patch("sys.stdout", new_callable=io.StringIO) as stdout:
            code = await cli_report("ice roller", 1, "json")

        self.assertEqual(code, 1)
        self.assertEqual(stdout.getvalue(), "")


if __name__ == "__main__":
    unittest.main()
