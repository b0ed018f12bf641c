"""Run history, error log, and queue status commands."""

import rich_click as click
from rich.markup import escape
from rich.table import Table

from ..db import (
    get_connection,
    get_error_counts_by_kind,
    get_queue_counts,
    get_recent_api_errors,
    get_recent_runs,
    get_request_counts,
    resolve_api_errors,
)
from ..errors import ErrorKind
from ..tables import runs_to_markdown
from ._console import console, short_time, status_style

KIND_CHOICES = [kind.value for kind in ErrorKind]


@click.command()
@click.option("--limit", "-n", type=int, default=20, help="Number of runs to show")
@click.option("--markdown", is_flag=True, help="Print a markdown table")
def runs(limit: int, markdown: bool):
    """Show recent crawl runs."""
    with get_connection(readonly=True) as conn:
        recent = get_recent_runs(conn, limit=limit)

    if not recent:
        console.print("No crawl runs recorded.")
        return

    if markdown:
        click.echo(runs_to_markdown(recent))
        return

    table = Table(show_header=True)
    table.add_column("Run", justify="right", style="dim")
    table.add_column("Status")
    table.add_column("Started")
    table.add_column("Completed")
    table.add_column("Fetched", justify="right")
    table.add_column("Queued", justify="right")
    table.add_column("Errors", justify="right")

    for run in recent:
        style = status_style(run.status.value)
        table.add_row(
            str(run.id),
            f"[{style}]{run.status.value}[/{style}]",
            short_time(run.started_at),
            short_time(run.completed_at),
            str(run.tweets_fetched),
            str(run.tweets_analyzed),
            str(run.errors_count),
        )

    console.print(table)


@click.group()
def errors():
    """Inspect the API error log."""
    pass


@errors.command("list")
@click.option("--kind", "-k", type=click.Choice(KIND_CHOICES), help="Filter by error kind")
@click.option("--all", "include_resolved", is_flag=True, help="Include resolved errors")
@click.option("--limit", "-n", type=int, default=50, help="Number of errors to show")
def errors_list(kind: str | None, include_resolved: bool, limit: int):
    """List recent errors."""
    with get_connection(readonly=True) as conn:
        rows = get_recent_api_errors(conn, limit=limit, error_type=kind, include_resolved=include_resolved)

    if not rows:
        console.print("No errors found.")
        return

    table = Table(show_header=True)
    table.add_column("When", style="dim")
    table.add_column("Kind", style="yellow")
    table.add_column("Endpoint")
    table.add_column("Code")
    table.add_column("Message")

    for row in rows:
        table.add_row(
            short_time(row["occurred_at"]),
            row["error_type"],
            row["endpoint"] or "-",
            row["error_code"] or "-",
            escape(row["error_message"]),
        )

    console.print(table)


@errors.command("stats")
@click.option("--hours", type=int, default=None, help="Only count errors from the last N hours")
def errors_stats(hours: int | None):
    """Count errors by kind."""
    with get_connection(readonly=True) as conn:
        counts = get_error_counts_by_kind(conn, since_hours=hours)

    if not counts:
        console.print("No errors found.")
        return

    period = f"last {hours}h" if hours else "all time"
    table = Table(title=f"Errors by kind ({period})", show_header=False)
    table.add_column("Kind", style="bold")
    table.add_column("Count", justify="right")
    for error_type, count in counts.items():
        table.add_row(error_type, str(count))
    console.print(table)


@errors.command("resolve")
@click.option("--kind", "-k", type=click.Choice(KIND_CHOICES), help="Only resolve errors of this kind")
def errors_resolve(kind: str | None):
    """Mark logged errors as resolved."""
    with get_connection() as conn:
        count = resolve_api_errors(conn, error_type=kind)
        conn.commit()
    console.print(f"Resolved {count} error(s)")


@click.command()
def queue():
    """Show analysis job and reanalysis request counts."""
    with get_connection(readonly=True) as conn:
        jobs = get_queue_counts(conn)
        requests = get_request_counts(conn)

    table = Table(title="Analysis queue", show_header=False)
    table.add_column("Status", style="bold")
    table.add_column("Jobs", justify="right")
    if jobs:
        for status, count in jobs.items():
            table.add_row(status, str(count))
    else:
        table.add_row("(empty)", "0")
    console.print(table)

    console.print("")
    req_table = Table(title="Reanalysis requests", show_header=False)
    req_table.add_column("Status", style="bold")
    req_table.add_column("Requests", justify="right")
    for status in ("pending", "processing", "completed"):
        req_table.add_row(status, str(requests.get(status, 0)))
    console.print(req_table)
