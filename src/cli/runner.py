# src/cli/runner.py

"""Headless CLI: build one report and render it with Rich or as JSON."""

import json
import logging
import sys

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from src.config.settings import Settings
from src.models.listing import Listing
from src.models.report import Report
from src.reporting.formatting import ReportFormatter
from src.reporting.statistics import build_observations, summarize
from src.scrapers.exceptions import FetchFailure
from src.services.report_pipeline import ReportPipeline

logger = logging.getLogger("price_report.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _listing_to_dict(listing: Listing) -> dict[str, object]:
    """Serialise a listing to a plain dict for JSON output."""
    return {
        "name": listing.name,
        "price": listing.price,
        "url": listing.url,
        "seller": listing.seller,
        "location": listing.location,
        "rating": listing.rating,
        "reviewCount": listing.review_count,
        "sold": listing.sold,
        "sponsored": listing.sponsored,
        "description": list(listing.description),
    }


def report_to_dict(report: Report) -> dict[str, object]:
    """Serialise a report, including its derived metrics."""
    summary = summarize(report, Settings.PRICE_BRACKETS)
    cheapest = report.cheapest
    return {
        "query": report.query,
        "fetchedAt": report.fetched_at.isoformat(),
        "currency": Settings.CURRENCY,
        "cheapest": (
            _listing_to_dict(cheapest) if cheapest is not None else None
        ),
        "products": [_listing_to_dict(p) for p in report.products],
        "stats": {
            "total": summary.total,
            "median": summary.median,
            "average": summary.average,
            "highest": (
                summary.highest.price
                if summary.highest is not None
                else None
            ),
            "atOrBelow": {
                str(threshold): count
                for threshold, count in summary.bracket_counts.items()
            },
        },
    }


def _cheapest_panel(report: Report, fmt: ReportFormatter) -> Panel:
    """Headline card for the cheapest listing."""
    cheapest = report.cheapest
    if cheapest is None:
        return Panel(
            "Could not identify any qualifying listings "
            "in the sampled data.",
            title="Cheapest Available",
            border_style="yellow",
        )

    grid = Table.grid(padding=(0, 2))
    grid.add_column(style="bold")
    grid.add_column()
    price = fmt.currency(cheapest.price)
    if cheapest.sponsored:
        price += "  [magenta]Sponsored[/magenta]"
    grid.add_row("Listing", escape(cheapest.name))
    grid.add_row("Price", f"[green]{price}[/green]")
    grid.add_row(
        "Seller",
        f"{escape(cheapest.seller or 'Unknown')} "
        f"[dim]({escape(cheapest.location or 'Location not listed')})[/dim]",
    )
    grid.add_row(
        "Performance",
        f"⭐ {fmt.rating(cheapest.rating)}  "
        f"[dim]{fmt.reviews(cheapest.review_count)}[/dim]",
    )
    grid.add_row("Link", f"[link={cheapest.url}]{cheapest.url}[/link]")
    return Panel(grid, title="Cheapest Available", border_style="green")


def _metrics_table(report: Report, fmt: ReportFormatter) -> Table:
    """Market metrics plus plain-language observations."""
    summary = summarize(report, Settings.PRICE_BRACKETS)
    table = Table(
        title="Market Metrics",
        show_header=False,
        title_style="bold cyan",
    )
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Total qualifying listings", str(summary.total))
    table.add_row("Median price", fmt.currency(summary.median))
    table.add_row("Average price", fmt.currency(summary.average))
    if summary.highest is not None:
        table.add_row(
            "Highest price observed",
            fmt.currency(summary.highest.price),
        )
    for observation in build_observations(summary, fmt):
        table.add_row("•", observation)
    return table


def _listings_table(
    report: Report, fmt: ReportFormatter, limit: int | None,
) -> Table:
    """Price-ordered listings table."""
    table = Table(
        title="Price-Ordered Listings",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Product", max_width=60)
    table.add_column(
        f"Price ({Settings.CURRENCY})", justify="right", style="green",
    )
    table.add_column("Rating", justify="center")
    table.add_column("Reviews", justify="right")
    table.add_column("Seller")
    table.add_column("Location")
    table.add_column("Sold", justify="right")

    rows = report.products if limit is None else report.products[:limit]
    for idx, item in enumerate(rows, 1):
        name = f"[link={item.url}]{escape(item.name[:60])}[/link]"
        if item.sponsored:
            name += "\n[magenta]Sponsored[/magenta]"
        table.add_row(
            str(idx),
            name,
            fmt.currency(item.price),
            fmt.rating(item.rating),
            fmt.count(item.review_count),
            escape(item.seller or "Unknown"),
            escape(item.location or "Unlisted"),
            escape(item.sold or fmt.not_available),
        )

    if not report.products:
        table.add_row("", "No matching listings found.", *[""] * 6)

    return table


def render_report(
    report: Report,
    console: Console,
    formatter: ReportFormatter | None = None,
    limit: int | None = None,
) -> None:
    """Print the full report (headline, metrics, listings, highlights)."""
    fmt = formatter or ReportFormatter()
    console.rule(
        f"[bold]Daraz Price Report: {escape(report.query)}[/bold]"
    )
    console.print(
        f"[dim]Snapshot generated: {fmt.timestamp(report.fetched_at)}[/dim]"
    )
    console.print(_cheapest_panel(report, fmt))
    console.print(_metrics_table(report, fmt))
    console.print(_listings_table(report, fmt, limit))

    cheapest = report.cheapest
    if cheapest is not None and cheapest.description:
        console.print("[bold cyan]Cheapest Item Highlights[/bold cyan]")
        for bullet in cheapest.description[: Settings.HIGHLIGHT_LIMIT]:
            console.print(f"  • {escape(bullet)}")

    console.print(
        "[dim]Listings may change at any time; re-run the report "
        "for the latest snapshot.[/dim]"
    )


async def cli_report(
    query: str | None,
    pages: int | None,
    output_format: str,
    limit: int | None = None,
) -> int:
    """Build and print a report; return an exit code (0=ok, 1=fail)."""
    pipeline = ReportPipeline(query=query, pages=pages)
    _err.print(
        f"[bold]Fetching:[/bold] {pipeline.query}  "
        f"[dim]pages={pipeline.pages}[/dim]"
    )

    try:
        report = await pipeline.build_report()
    except FetchFailure as exc:
        logger.error(
            "Report build failed for '%s': %s (url=%s, status=%s)",
            pipeline.query,
            exc,
            exc.url,
            exc.status_code,
        )
        _err.print(f"[red]Data unavailable: {escape(str(exc))}[/red]")
        return 1

    if report.is_empty:
        _err.print("[yellow]No qualifying listings found.[/yellow]")
    else:
        _err.print(
            f"[green]✓ {len(report.products)} qualifying listings[/green]"
        )

    if output_format == "json":
        json.dump(
            report_to_dict(report),
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
    else:
        render_report(report, Console(), limit=limit)

    return 0
