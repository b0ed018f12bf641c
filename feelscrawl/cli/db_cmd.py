"""Database commands."""

import rich_click as click

from ..config import get_database_path
from ..db import count_tweets, get_connection, init_db
from ._console import console


@click.group()
def db():
    """Database operations."""


@db.command("path")
def db_path():
    """Show database file path."""
    console.print(str(get_database_path()))


@db.command("init")
def db_init():
    """Create missing tables and apply column migrations.

    Safe to run against a database created by the admin backend.
    """
    init_db()
    with get_connection(readonly=True) as conn:
        total = count_tweets(conn)
    console.print(f"Database initialized at: {get_database_path()} ({total} tweets)")
