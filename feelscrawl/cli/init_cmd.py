"""Init and doctor commands."""

import sys

import rich_click as click
from rich.panel import Panel

from ..auth import get_bearer_token
from ..config import get_config_path, get_data_dir, get_database_path, load_config, save_config
from ..db import get_active_accounts, get_connection, get_enabled_model_ids, init_db
from ..errors import ConfigurationError
from ._console import console, status_icon
from ._helpers import load_settings_or_exit


@click.command()
@click.option("--force", is_flag=True, help="Overwrite existing config file")
def init(force: bool):
    """Initialize feelscrawl data directory, configuration, and database.

    Creates:
    - Data directory (~/.local/share/feelscrawl/ or FEELSCRAWL_DATA_DIR)
    - Config file (~/.config/feelscrawl/config.json)
    - Database (twitter_feels.db, or DATABASE_URL)
    """
    data_dir = get_data_dir()
    config_path = get_config_path()
    db_path = get_database_path()

    console.print("Initializing feelscrawl...")
    console.print(f"  Data directory: {data_dir}")
    console.print(f"  Config file: {config_path}")

    data_dir.mkdir(parents=True, exist_ok=True)
    console.print(f"  {status_icon(True)} Data directory created")

    if config_path.exists() and not force:
        console.print("  [yellow]SKIP[/yellow] Config already exists (use --force to overwrite)")
    else:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        save_config(load_config(apply_env=False))
        console.print(f"  {status_icon(True)} Config file created")

    init_db()
    console.print(f"  {status_icon(True)} Database initialized at {db_path}")

    console.print("")
    console.print("Initialization complete! Next steps:")
    console.print("  1. Set the API token: export TWITTER_BEARER_TOKEN=...")
    console.print("  2. Add accounts: feelscrawl accounts add @handle")
    console.print("  3. Register models: feelscrawl models add <name> --enable")
    console.print("  4. Crawl once: feelscrawl crawl")


@click.command()
def doctor():
    """Check feelscrawl configuration.

    Verifies:
    - Data directory exists
    - Config file is valid
    - Bearer token is set
    - Database is accessible and has active accounts
    """
    issues = []
    warnings = []

    console.print("Checking feelscrawl configuration...\n")

    data_dir = get_data_dir()
    console.print(f"Data directory: {data_dir}")
    if data_dir.exists():
        console.print(f"  {status_icon(True)} Directory exists")
    else:
        console.print(f"  {status_icon(False)} Directory does not exist")
        issues.append("Run 'feelscrawl init' to create data directory")

    config_path = get_config_path()
    console.print(f"\nConfig file: {config_path}")
    settings = load_settings_or_exit()
    if config_path.exists():
        console.print(f"  {status_icon(True)} Config file valid")
    else:
        console.print("  [yellow]WARN[/yellow] Config file not found (using defaults)")
        warnings.append("Run 'feelscrawl init' to create config file")

    console.print("\nAPI:")
    token_env = settings.api.bearer_token_env
    try:
        get_bearer_token(token_env)
        console.print(f"  {status_icon(True)} {token_env} set")
    except ConfigurationError:
        console.print(f"  {status_icon(False)} {token_env} not set")
        issues.append(f"Set {token_env} in the environment or ~/.env")
    console.print(f"  Rate limit: {settings.api.rate_limit_per_15min} requests / 15 min")

    db_path = get_database_path()
    console.print(f"\nDatabase: {db_path}")
    if db_path.exists():
        with get_connection(readonly=True) as conn:
            active = get_active_accounts(conn)
            models = get_enabled_model_ids(conn)
        console.print(f"  {status_icon(True)} Database accessible")
        if active:
            console.print(f"  {status_icon(True)} {len(active)} active account(s)")
        else:
            console.print("  [yellow]WARN[/yellow] No active accounts")
            warnings.append("Add accounts with 'feelscrawl accounts add @handle'")
        if not models:
            console.print("  [dim]INFO[/dim] No enabled models (jobs are queued without a model)")
    else:
        console.print("  [yellow]WARN[/yellow] Database not found")
        warnings.append("Run 'feelscrawl init' to create database")

    console.print("\n" + "=" * 50)

    if issues:
        console.print(
            Panel(
                "\n".join(f"  - {issue}" for issue in issues),
                title=f"{len(issues)} issue(s) found",
                border_style="red",
            )
        )
        sys.exit(1)
    elif warnings:
        console.print(
            Panel(
                "\n".join(f"  - {w}" for w in warnings),
                title=f"All checks passed with {len(warnings)} warning(s)",
                border_style="yellow",
            )
        )
    else:
        console.print("\n[green]All checks passed![/green]")
