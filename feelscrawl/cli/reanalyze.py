"""Reanalysis request commands.

Requests are only queued here; the next crawl cycle turns them into jobs.
"""

import sys

import rich_click as click

from ..db import create_reanalysis_request, get_account_by_handle, get_connection
from ._console import console


@click.group()
def reanalyze():
    """Queue stored tweets for another round of analysis."""
    pass


def _queued(request_id: int, what: str) -> None:
    console.print(f"Queued reanalysis request #{request_id} for {what}")


@reanalyze.command("item")
@click.argument("tweet_id", type=int)
def reanalyze_item(tweet_id: int):
    """Reanalyze one stored tweet (internal id)."""
    with get_connection() as conn:
        request_id = create_reanalysis_request(conn, "item", tweet_id=tweet_id)
        conn.commit()
    _queued(request_id, f"tweet {tweet_id}")


@reanalyze.command("account")
@click.argument("handle")
def reanalyze_account(handle: str):
    """Reanalyze every stored tweet of an account."""
    with get_connection() as conn:
        account = get_account_by_handle(conn, handle)
        if account is None:
            console.print(f"[red]Unknown account: @{handle.lstrip('@')}[/red]")
            sys.exit(1)
        request_id = create_reanalysis_request(conn, "account", twitter_user_id=account.id)
        conn.commit()
    _queued(request_id, f"@{account.username}")


@reanalyze.command("all")
@click.confirmation_option(prompt="Queue every stored tweet for reanalysis?")
def reanalyze_all():
    """Reanalyze every stored tweet."""
    with get_connection() as conn:
        request_id = create_reanalysis_request(conn, "all")
        conn.commit()
    _queued(request_id, "all tweets")
