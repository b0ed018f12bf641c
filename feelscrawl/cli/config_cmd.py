"""Config commands."""

import json
import sys

import rich_click as click
from pydantic import ValidationError
from rich.syntax import Syntax

from ..config import ENV_OVERRIDES, get_config_path, load_config, save_config
from ..models import FeelsConfig
from ._console import console


@click.group()
def config():
    """Manage configuration."""
    pass


@config.command("show")
def config_show():
    """Show the effective configuration (file values plus environment overrides)."""
    cfg = load_config()
    json_str = json.dumps(cfg, indent=2)
    syntax = Syntax(json_str, "json", theme="monokai")
    console.print(syntax)


@config.command("path")
def config_path():
    """Show configuration file path."""
    console.print(str(get_config_path()))


@config.command("set")
@click.argument("key")
@click.argument("value")
def config_set(key: str, value: str):
    """Set a configuration value (e.g., crawler.interval_hours 2).

    The result is validated before it is written.
    """
    cfg = load_config(apply_env=False)

    parts = key.split(".")
    target = cfg
    for part in parts[:-1]:
        if part not in target:
            target[part] = {}
        target = target[part]

    # Parse value (try as JSON, fall back to string)
    try:
        parsed_value = json.loads(value)
    except json.JSONDecodeError:
        parsed_value = value

    target[parts[-1]] = parsed_value

    try:
        FeelsConfig.model_validate(cfg)
    except ValidationError as e:
        console.print(f"[red]Invalid value for {key}:[/red]\n{e}")
        sys.exit(1)

    save_config(cfg)
    console.print(f"Set {key} = {parsed_value}")

    overriding = [name for name, (section, field, _) in ENV_OVERRIDES.items() if f"{section}.{field}" == key]
    for env_name in overriding:
        console.print(f"[yellow]Note:[/yellow] {env_name} overrides this value when set")
