# src/config/logging_config.py

"""Run log for the Daraz price report.

Every invocation of ``main.py`` opens ``logs/run_<YYYYMMDD_HHMMSS>.log``
and routes the ``price_report.*`` loggers into it:

- ``price_report.fetcher``: request URLs, retry attempts, challenge
  pages and the cloudscraper fallback for each search page.
- ``price_report.parser`` and ``price_report.filters``: per-block drops
  (missing price, bad URL) at DEBUG; drop and duplicate counts at INFO.
- ``price_report.pipeline`` and ``price_report.assembler``: page totals
  and the final listing count.
- ``price_report.cli``: a ``FetchFailure`` with its URL and status.

The console only carries WARNING and above, on stderr, so table and
JSON output on stdout is left untouched. Chatter from ``urllib3`` and
``charset_normalizer`` (pulled in by the cloudscraper fallback) is
capped at WARNING for the same reason.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

# The logger name column identifies the pipeline stage
_RUN_LOG_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)-24s | "
    "%(funcName)s:%(lineno)d | %(message)s"
)

# Console lines sit above the rendered report, so keep them short
_CONSOLE_FORMAT = "%(levelname)s [%(name)s] %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_QUIET_LOGGERS = ("urllib3", "charset_normalizer")


def setup_logging(logs_dir: Path | None = None) -> Path:
    """Open the run log and attach handlers to the ``price_report`` logger.

    Args:
        logs_dir: Directory for the run log. Defaults to
            ``Settings.LOGS_DIR``; tests pass a scratch directory.

    Returns:
        The :class:`~pathlib.Path` to the log file for this run.
    """
    target_dir: Path = logs_dir or Settings.LOGS_DIR
    target_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = target_dir / f"run_{timestamp}.log"

    root_logger = logging.getLogger("price_report")
    root_logger.setLevel(logging.DEBUG)
    # Keep report records out of any handler the host process installs
    root_logger.propagate = False

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # Repeated calls (tests, re-entry from the CLI) keep one handler set
    if root_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_RUN_LOG_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    root_logger.info("Run log opened: %s", log_file)

    return log_file
