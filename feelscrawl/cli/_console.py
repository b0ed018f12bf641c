"""Shared Rich console instance and helpers."""

from rich.console import Console

from ..time_utils import parse_timestamp

console = Console()


def status_icon(ok: bool) -> str:
    """Return a colored checkmark or cross for status output."""
    if ok:
        return "[green]✓[/green]"
    return "[red]✗[/red]"


def status_style(status: str) -> str:
    """Color for a run or request status."""
    return {
        "completed": "green",
        "failed": "red",
        "running": "yellow",
        "processing": "yellow",
        "pending": "cyan",
    }.get(status, "white")


def short_time(value: str | None) -> str:
    """Render a stored timestamp as ``YYYY-MM-DD HH:MM`` UTC, or '-'."""
    parsed = parse_timestamp(value)
    return parsed.strftime("%Y-%m-%d %H:%M") if parsed else "-"
