# main.py

"""Entry point for the Daraz price report CLI."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging
from src.config.settings import Settings

logger = logging.getLogger("price_report.main")


def _positive_int(value: str) -> int:
    """argparse type for integers >= 1."""
    number = int(value)
    if number < 1:
        msg = f"must be >= 1, got {number}"
        raise argparse.ArgumentTypeError(msg)
    return number


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="price_report",
        description=(
            "Point-in-time price report for a Daraz Bangladesh "
            "search, ordered from cheapest."
        ),
    )
    parser.add_argument(
        "-q",
        "--query",
        default=Settings.QUERY,
        help=f"Search term (default: {Settings.QUERY!r}).",
    )
    parser.add_argument(
        "-p",
        "--pages",
        type=_positive_int,
        default=Settings.PAGE_COUNT,
        help=f"Search pages to fetch (default: {Settings.PAGE_COUNT}).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["table", "json"],
        default="table",
        dest="output_format",
        help="Output format (default: table).",
    )
    parser.add_argument(
        "-n",
        "--limit",
        type=_positive_int,
        default=None,
        help="Show at most this many rows in the listings table.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse arguments, build the report and exit with its status."""
    log_file = setup_logging()
    logger.info("price_report starting, log file: %s", log_file)

    args = _build_parser().parse_args(argv)

    from src.cli.runner import cli_report

    try:
        exit_code = asyncio.run(
            cli_report(
                query=args.query,
                pages=args.pages,
                output_format=args.output_format,
                limit=args.limit,
            )
        )
    except Exception:
        logger.critical("Fatal error during report run", exc_info=True)
        raise
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
