# src/services/report_pipeline.py

"""Runs fetch, parse, qualify and assemble for one price report."""

import asyncio
import logging
from typing import Any

from src.config.settings import Settings
from src.filters.listing_qualifier import ListingQualifier
from src.models.report import Report
from src.parsers.listing_parser import parse_listings
from src.scrapers.daraz_fetcher import DarazFetcher
from src.services.report_assembler import assemble_report

logger = logging.getLogger("price_report.pipeline")


class ReportPipeline:
    """Coordinates one report build.

    Every call to :meth:`build_report` fetches afresh; nothing is cached
    between calls, so concurrent builds share no mutable state.
    """

    def __init__(
        self,
        query: str | None = None,
        pages: int | None = None,
        base_url: str | None = None,
    ) -> None:
        self.settings = Settings()
        self.query = query or self.settings.QUERY
        self.pages = pages if pages is not None else self.settings.PAGE_COUNT
        if self.pages < 1:
            msg = f"pages must be >= 1, got {self.pages}"
            raise ValueError(msg)
        self.base_url = base_url or self.settings.BASE_URL

    def _make_fetcher(self) -> DarazFetcher:
        return DarazFetcher(query=self.query, base_url=self.base_url)

    async def _fetch_all(self) -> list[dict[str, Any]]:
        """Fetch every page concurrently and concatenate in page order.

        The first ``FetchFailure`` propagates; nothing is parsed until
        all pages are in.
        """
        fetcher = self._make_fetcher()
        tasks = [
            asyncio.to_thread(fetcher.fetch_page, page)
            for page in range(1, self.pages + 1)
        ]
        batches = await asyncio.gather(*tasks)

        blocks: list[dict[str, Any]] = []
        for batch in batches:
            blocks.extend(batch)
        return blocks

    async def build_report(self) -> Report:
        """Build a fresh report.

        Raises:
            FetchFailure: when any search page could not be retrieved.
        """
        logger.info(
            "Building report for '%s' (%d page(s))", self.query, self.pages,
        )
        blocks = await self._fetch_all()
        candidates = parse_listings(blocks, self.base_url)
        result = ListingQualifier.qualify(candidates)
        logger.info(
            "%d raw blocks -> %d parsed -> %d qualifying "
            "(%d invalid, %d duplicate)",
            len(blocks),
            len(candidates),
            len(result.listings),
            result.invalid_count,
            result.duplicate_count,
        )
        return assemble_report(result.listings, self.query)
