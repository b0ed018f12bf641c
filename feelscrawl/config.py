"""Configuration management for feelscrawl."""

import copy
import json
import os
from pathlib import Path
from typing import Any

from .models.config import FeelsConfig

# Application name for XDG paths
APP_NAME = "feelscrawl"

# Default configuration
DEFAULT_CONFIG: dict[str, Any] = {
    "crawler": {
        "interval_hours": 1,
        "history_depth_days": 90,
        "reanalysis_batch_size": 25,
        "stale_processing_minutes": 30,  # processing requests older than this are reclaimed
        "reconcile_on_start": True,
    },
    "api": {
        "base_url": "https://api.twitter.com/2",
        "rate_limit_per_15min": 450,
        "timeout_seconds": 30.0,
        "bearer_token_env": "TWITTER_BEARER_TOKEN",
        "user_agent": "feelscrawl/0.1",
    },
    "paths": {
        # If not set, XDG defaults are used
        "data_dir": None,
    },
}

# Environment variables that override config.json values
ENV_OVERRIDES: dict[str, tuple[str, str, type]] = {
    "CRAWL_INTERVAL_HOURS": ("crawler", "interval_hours", float),
    "HISTORY_DEPTH_DAYS": ("crawler", "history_depth_days", int),
    "RATE_LIMIT_PER_15MIN": ("api", "rate_limit_per_15min", int),
}


def get_xdg_config_home() -> Path:
    """Get XDG config home directory."""
    return Path(os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config")))


def get_xdg_data_home() -> Path:
    """Get XDG data home directory."""
    return Path(os.environ.get("XDG_DATA_HOME", os.path.expanduser("~/.local/share")))


def get_config_path() -> Path:
    """Get the path to the config file."""
    return get_xdg_config_home() / APP_NAME / "config.json"


def load_config(apply_env: bool = True) -> dict[str, Any]:
    """Load configuration, merging file values (and env overrides) over defaults."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    config_path = get_config_path()

    if config_path.exists():
        with open(config_path) as f:
            user_config = json.load(f)
            config = deep_merge(config, user_config)

    if apply_env:
        config = apply_env_overrides(config)
    return config


def load_settings() -> FeelsConfig:
    """Load configuration as a validated model."""
    return FeelsConfig.model_validate(load_config())


def save_config(config: dict[str, Any]) -> None:
    """Save configuration to file."""
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        json.dump(config, f, indent=2)


def deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply deployment environment variables on top of file configuration.

    Values that fail to parse are ignored and the file/default value wins.
    """
    for env_name, (section, key, cast) in ENV_OVERRIDES.items():
        raw = os.environ.get(env_name)
        if raw is None or not raw.strip():
            continue
        try:
            value = cast(raw.strip())
        except ValueError:
            continue
        config.setdefault(section, {})[key] = value
    return config


def get_data_dir() -> Path:
    """
    Get the data directory for feelscrawl.

    Priority:
    1. FEELSCRAWL_DATA_DIR environment variable
    2. paths.data_dir in config.json
    3. XDG default: ~/.local/share/feelscrawl/
    """
    env_dir = os.environ.get("FEELSCRAWL_DATA_DIR")
    if env_dir:
        return Path(env_dir)

    config = load_config()
    config_dir = config.get("paths", {}).get("data_dir")
    if config_dir:
        return Path(config_dir)

    return get_xdg_data_home() / APP_NAME


def get_database_path() -> Path:
    """Get the database path (DATABASE_URL wins over the data directory)."""
    database_url = os.environ.get("DATABASE_URL")
    if database_url:
        return Path(database_url.removeprefix("sqlite:///"))
    return get_data_dir() / "twitter_feels.db"
