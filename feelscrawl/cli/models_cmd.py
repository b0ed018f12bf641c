"""Sentiment model registry commands."""

import sys

import rich_click as click
from rich.table import Table

from ..db import add_model, get_connection, get_models, init_db, set_model_enabled
from ._console import console


@click.group()
def models():
    """Manage the models new tweets are queued for."""
    pass


@models.command("list")
def models_list():
    """List registered models."""
    with get_connection(readonly=True) as conn:
        rows = get_models(conn)

    if not rows:
        console.print("No models registered. Jobs are queued without a model.")
        return

    table = Table(show_header=True)
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Enabled")
    table.add_column("Jobs", justify="right")

    for m in rows:
        table.add_row(
            str(m["id"]),
            m["name"],
            "[green]yes[/green]" if m["is_enabled"] else "[dim]no[/dim]",
            str(m["job_count"]),
        )

    console.print(table)


@models.command("add")
@click.argument("name")
@click.option("--enable", is_flag=True, help="Enable immediately")
def models_add(name: str, enable: bool):
    """Register a model."""
    init_db()
    with get_connection() as conn:
        model_id = add_model(conn, name, enabled=enable)
        if enable:
            set_model_enabled(conn, name, True)
        conn.commit()
    state = "enabled" if enable else "disabled"
    console.print(f"Registered model {name} (id {model_id}, {state})")


def _toggle(name: str, enabled: bool) -> None:
    with get_connection() as conn:
        found = set_model_enabled(conn, name, enabled)
        conn.commit()
    if not found:
        console.print(f"[red]Unknown model: {name}[/red]")
        sys.exit(1)


@models.command("enable")
@click.argument("name")
def models_enable(name: str):
    """Queue new tweets for this model."""
    _toggle(name, True)
    console.print(f"Enabled {name}")


@models.command("disable")
@click.argument("name")
def models_disable(name: str):
    """Stop queueing new tweets for this model."""
    _toggle(name, False)
    console.print(f"Disabled {name}")
