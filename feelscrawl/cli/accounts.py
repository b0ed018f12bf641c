"""Account management commands."""

import sys

import rich_click as click
from rich.table import Table

from ..db import get_accounts, get_connection, init_db, parse_timestamp, set_account_active, upsert_tracked_account
from ._console import console


@click.group()
def accounts():
    """Manage tracked accounts."""
    pass


@accounts.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include inactive accounts")
def accounts_list(include_inactive: bool):
    """List tracked accounts."""
    with get_connection(readonly=True) as conn:
        accts = get_accounts(conn, include_inactive=include_inactive)

    if not accts:
        console.print("No accounts found.")
        return

    table = Table(show_header=True)
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Handle", style="cyan")
    table.add_column("Name")
    table.add_column("Followers", justify="right")
    table.add_column("Tweets", justify="right")
    table.add_column("Checkpoint")
    table.add_column("Active")

    for a in accts:
        checkpoint = parse_timestamp(a["last_tweet_timestamp"])
        table.add_row(
            str(a["id"]),
            f"@{a['username']}",
            a["display_name"] or "-",
            str(a["follower_count"]) if a["follower_count"] is not None else "-",
            str(a["tweet_count"]),
            checkpoint.strftime("%Y-%m-%d %H:%M") if checkpoint else "-",
            "[green]yes[/green]" if a["is_active"] else "[red]no[/red]",
        )

    console.print(table)


@accounts.command("add")
@click.argument("handle")
@click.option("--name", "-n", help="Display name (refreshed from the API on the next crawl)")
def accounts_add(handle: str, name: str | None):
    """Add an account to tracking (or re-activate it)."""
    init_db()
    with get_connection() as conn:
        account_id = upsert_tracked_account(conn, handle, display_name=name)
        conn.commit()
    console.print(f"Tracking @{handle.strip().lstrip('@')} (id {account_id})")


def _set_active(handle: str, active: bool) -> None:
    with get_connection() as conn:
        found = set_account_active(conn, handle, active)
        conn.commit()

    if not found:
        console.print(f"[red]Unknown account: @{handle.lstrip('@')}[/red]")
        sys.exit(1)


@accounts.command("remove")
@click.argument("handle")
def accounts_remove(handle: str):
    """Stop crawling an account. Stored tweets are kept."""
    _set_active(handle, False)
    console.print(f"Deactivated @{handle.lstrip('@')}")


@accounts.command("activate")
@click.argument("handle")
def accounts_activate(handle: str):
    """Resume crawling a previously removed account."""
    _set_active(handle, True)
    console.print(f"Activated @{handle.lstrip('@')}")
