# src/config/settings.py

"""Central configuration for the Daraz price report."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the Daraz price report."""

    # --- Marketplace ---
    BASE_URL: str = os.getenv(
        "DARAZ_BASE_URL", "https://www.daraz.com.bd"
    )
    SEARCH_PATH: str = "/catalog/"
    QUERY: str = "ice roller"
    SORT: str = "priceasc"
    PAGE_COUNT: int = 2                 # Search pages per report

    # --- Fetching ---
    REQUEST_DELAY: float = 1.0          # Base seconds between retries
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    MAX_RETRIES: int = 2                # Attempts per page (one retry)
    RETRY_STATUS_CODES: tuple[int, ...] = (429, 500, 502, 503, 504)
    CHALLENGE_MARKERS: list[str] = [
        "captcha",
        "punish",
        "verify you are human",
        "unusual traffic",
        "challenges.cloudflare.com",
    ]

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json, text/plain, */*",
        "Accept-Language": "en-US,en;q=0.9",
        "sec-ch-ua": (
            '"Google Chrome";v="131", '
            '"Chromium";v="131", '
            '"Not_A Brand";v="24"'
        ),
        "sec-ch-ua-mobile": "?0",
        "sec-ch-ua-platform": '"Windows"',
        "X-Requested-With": "XMLHttpRequest",
    }

    # --- Report presentation ---
    CURRENCY: str = "BDT"
    CURRENCY_SYMBOL: str = "৳"
    DISPLAY_TIMEZONE: str = "Asia/Dhaka"
    PRICE_BRACKETS: tuple[int, ...] = (200, 500)
    HIGHLIGHT_LIMIT: int = 6            # Description bullets shown

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"
