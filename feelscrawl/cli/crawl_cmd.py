"""Crawl and run commands."""

import sys
from contextlib import closing

import rich_click as click
from rich.markup import escape
from rich.table import Table

from ..crawler import CycleResult, Scheduler, database_cycle, run_crawl_cycle
from ..db import get_connection, init_db
from ..errors import CrawlerError
from ..logging_config import setup_logging
from ._console import console, status_style
from ._helpers import build_client_or_exit, load_settings_or_exit


def _print_result(result: CycleResult) -> None:
    style = status_style(result.status.value)
    console.print(f"Run #{result.run_id}: [{style}]{result.status.value}[/{style}]")
    console.print(f"  Tweets fetched: {result.tweets_fetched}")
    console.print(f"  Jobs queued: {result.jobs_queued}")
    if result.requests_processed:
        console.print(f"  Reanalysis requests handled: {result.requests_processed}")
    if result.jobs_reconciled:
        console.print(f"  Missing jobs reconciled: {result.jobs_reconciled}")

    if result.errors:
        table = Table(title=f"{len(result.errors)} error(s)", show_header=True)
        table.add_column("Kind", style="yellow")
        table.add_column("Endpoint", style="dim")
        table.add_column("Message")
        for detail in result.errors:
            table.add_row(detail.error_type.value, detail.endpoint or "-", escape(detail.message))
        console.print(table)


@click.command()
@click.option("--log-level", default=None, help="Log level (default: FEELSCRAWL_LOG_LEVEL or INFO)")
def crawl(log_level: str | None):
    """Run a single crawl cycle now.

    Exits with status 1 when the cycle fails.
    """
    setup_logging(log_level, console=console)
    settings = load_settings_or_exit()
    init_db()
    client = build_client_or_exit(settings)

    with closing(client), get_connection() as conn:
        try:
            result = run_crawl_cycle(conn, client, settings)
        except CrawlerError as e:
            console.print(f"[red]Crawl cycle failed: {e}[/red]")
            sys.exit(1)

    _print_result(result)
    if result.failed:
        sys.exit(1)


@click.command()
@click.option(
    "--interval-hours",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Hours between cycles (default: crawler.interval_hours)",
)
@click.option("--once", is_flag=True, help="Run one cycle through the scheduler and exit")
@click.option("--log-level", default=None, help="Log level (default: FEELSCRAWL_LOG_LEVEL or INFO)")
def run(interval_hours: float | None, once: bool, log_level: str | None):
    """Run the crawler on a fixed interval until SIGINT/SIGTERM."""
    setup_logging(log_level, console=console)
    settings = load_settings_or_exit()
    interval = interval_hours or settings.crawler.interval_hours

    init_db()
    client = build_client_or_exit(settings)
    scheduler = Scheduler(database_cycle(client, settings), interval_seconds=interval * 3600)

    with closing(client):
        if once:
            try:
                scheduler.trigger()
            except CrawlerError as e:
                console.print(f"[red]Crawl cycle failed: {e}[/red]")
                sys.exit(1)
            if scheduler.last_result is not None:
                _print_result(scheduler.last_result)
                if scheduler.last_result.failed:
                    sys.exit(1)
            return

        console.print(f"Crawling every {interval:g}h. Press Ctrl+C to stop.")
        scheduler.install_signal_handlers()
        scheduler.run_forever()
