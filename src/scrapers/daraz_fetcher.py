# src/scrapers/daraz_fetcher.py

"""Fetcher for the public Daraz Bangladesh catalog search endpoint."""

import json
import logging
import re
import time
from typing import Any, cast
from urllib.parse import urlencode

import cloudscraper  # type: ignore[import-untyped]
from bs4 import BeautifulSoup
from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.scrapers.exceptions import FetchFailure


class DarazFetcher:
    """Retrieve raw listing blocks from Daraz search result pages.

    The catalog endpoint answers ``ajax=true`` requests with JSON whose
    ``mods.listItems`` array holds one object per listing card. When the
    endpoint serves the full HTML page instead, the same JSON is read
    from the inline ``window.pageData`` script. The fetcher never
    interprets listing fields; that is the parser's job.
    """

    _PAGE_DATA_RE = re.compile(r"window\.pageData\s*=\s*")

    def __init__(
        self,
        query: str | None = None,
        base_url: str | None = None,
    ) -> None:
        self.logger = logging.getLogger("price_report.fetcher")
        self.settings = Settings()
        self.query = query or self.settings.QUERY
        self.base_url = (base_url or self.settings.BASE_URL).rstrip("/")
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    def build_url(self, page: int) -> str:
        """Return the search URL for *page* with ascending price sort."""
        params = urlencode(
            {
                "ajax": "true",
                "page": page,
                "q": self.query,
                "sort": self.settings.SORT,
            }
        )
        return f"{self.base_url}{self.settings.SEARCH_PATH}?{params}"

    def _build_headers(self) -> dict[str, str]:
        """Default headers plus a Referer on the marketplace homepage."""
        return {
            **self.settings.DEFAULT_HEADERS,
            "Referer": f"{self.base_url}/",
        }

    def _is_challenge(self, text: str) -> bool:
        """Detect bot-challenge interstitials served with HTTP 200."""
        if text.lstrip().startswith(("{", "[")):
            return False
        lower = text.lower()
        if "window.pagedata" in lower:
            return False
        for marker in self.settings.CHALLENGE_MARKERS:
            if marker in lower:
                self.logger.warning(
                    "[daraz] Challenge page detected (marker: '%s')",
                    marker,
                )
                return True
        return False

    def _fetch_get(self, url: str) -> str:
        """GET *url* with retries and return the response body.

        Raises:
            FetchFailure: when every attempt failed. ``status_code`` is
                set when the last failure was an HTTP status.
        """
        headers = self._build_headers()
        last_status: int | None = None
        last_error = "no attempt made"
        session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        try:
            for attempt in range(1, self.settings.MAX_RETRIES + 1):
                try:
                    resp = session.get(
                        url,
                        headers=headers,
                        timeout=self._request_timeout,
                    )
                except Exception as exc:
                    last_status = None
                    last_error = f"request error: {exc}"
                    self.logger.warning(
                        "[daraz] Request error on attempt %d: %s",
                        attempt,
                        exc,
                        exc_info=True,
                    )
                else:
                    if resp.status_code == 200:
                        if not self._is_challenge(resp.text):
                            return str(resp.text)
                        last_status = None
                        last_error = "bot challenge page"
                    else:
                        last_status = resp.status_code
                        last_error = f"HTTP {resp.status_code}"
                        self.logger.warning(
                            "[daraz] HTTP %d on attempt %d",
                            resp.status_code,
                            attempt,
                        )
                        if (
                            resp.status_code
                            not in self.settings.RETRY_STATUS_CODES
                        ):
                            break
                if attempt < self.settings.MAX_RETRIES:
                    time.sleep(self.settings.REQUEST_DELAY * attempt)
        finally:
            session.close()

        text = self._fetch_fallback(url, headers)
        if text is not None:
            return text

        raise FetchFailure(
            f"Daraz search request failed ({last_error})",
            url=url,
            status_code=last_status,
        )

    def _fetch_fallback(
        self, url: str, headers: dict[str, str],
    ) -> str | None:
        """Single cloudscraper attempt after the primary session gave up."""
        self.logger.info(
            "[daraz] curl_cffi exhausted, falling back to cloudscraper",
        )
        try:
            _cs: Any = cloudscraper
            scraper: Any = _cs.create_scraper()
            resp: Any = scraper.get(
                url,
                headers=headers,
                timeout=self._request_timeout,
            )
            if resp.status_code == 200:
                text = str(resp.text)
                if not self._is_challenge(text):
                    return text
            else:
                self.logger.warning(
                    "[daraz] cloudscraper HTTP %d", resp.status_code,
                )
        except Exception as exc:
            self.logger.error(
                "[daraz] cloudscraper fallback also failed: %s",
                exc,
                exc_info=True,
            )
        return None

    def _decode_payload(self, text: str, url: str) -> dict[str, Any]:
        """Decode a JSON body, or the ``window.pageData`` of an HTML page."""
        stripped = text.strip()
        if not stripped:
            raise FetchFailure("Empty response body", url=url)

        if stripped.startswith("{"):
            try:
                data: object = json.loads(stripped)
            except json.JSONDecodeError as exc:
                raise FetchFailure(
                    f"Malformed JSON payload: {exc}", url=url,
                ) from exc
        else:
            data = self._extract_page_data(stripped, url)

        if not isinstance(data, dict):
            raise FetchFailure("Unexpected payload type", url=url)
        return cast(dict[str, Any], data)

    def _extract_page_data(self, html: str, url: str) -> object:
        """Pull the inline ``window.pageData`` JSON out of a search page."""
        soup = BeautifulSoup(html, "lxml")
        for script in soup.find_all("script"):
            content = script.string
            if not content or "window.pageData" not in content:
                continue
            match = self._PAGE_DATA_RE.search(content)
            if not match:
                continue
            try:
                data, _end = json.JSONDecoder().raw_decode(
                    content, match.end()
                )
                return data
            except json.JSONDecodeError as exc:
                raise FetchFailure(
                    f"Malformed pageData JSON: {exc}", url=url,
                ) from exc
        raise FetchFailure("No listing data in HTML page", url=url)

    def _extract_blocks(
        self, data: dict[str, Any], url: str,
    ) -> list[dict[str, Any]]:
        """Return the raw listing blocks of a decoded payload."""
        mods = data.get("mods")
        if not isinstance(mods, dict):
            raise FetchFailure(
                "Payload has no 'mods' section", url=url,
            )
        items = cast(dict[str, Any], mods).get("listItems")
        if items is None:
            return []
        if not isinstance(items, list):
            raise FetchFailure(
                "'listItems' is not a list", url=url,
            )
        return cast(list[dict[str, Any]], items)

    def fetch_page(self, page: int) -> list[dict[str, Any]]:
        """Fetch one search page and return its raw listing blocks.

        Raises:
            FetchFailure: network failure, non-success status after
                retries, or a payload of unexpected shape.
        """
        url = self.build_url(page)
        self.logger.info("[daraz] Fetching page %d: %s", page, url)
        text = self._fetch_get(url)
        blocks = self._extract_blocks(self._decode_payload(text, url), url)
        self.logger.info(
            "[daraz] Page %d returned %d raw blocks", page, len(blocks),
        )
        return blocks
