"""Markdown rendering for run and error listings."""

from collections.abc import Sequence

from tabulate import tabulate

from .models import CrawlRun

RUN_COLUMNS = ["id", "status", "started", "completed", "fetched", "queued", "errors"]


def rows_to_markdown(columns: Sequence[str], rows: Sequence[Sequence]) -> str:
    """Render rows as a GitHub-flavoured markdown table; empty input renders as ''."""
    if not columns and not rows:
        return ""
    return tabulate(rows, headers=list(columns), tablefmt="github")


def runs_to_markdown(runs: Sequence[CrawlRun]) -> str:
    rows = [
        [
            run.id,
            run.status.value,
            run.started_at or "",
            run.completed_at or "",
            run.tweets_fetched,
            run.tweets_analyzed,
            run.errors_count,
        ]
        for run in runs
    ]
    return rows_to_markdown(RUN_COLUMNS, rows)
