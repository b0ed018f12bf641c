"""Centralised environment-file parsing and credential helpers."""

import os
from pathlib import Path

from .errors import ConfigurationError


def load_env_file(path: Path | None = None) -> dict[str, str]:
    """Parse a .env file, returning a dict of key-value pairs.

    Skips blank lines and comments.  Handles ``export KEY=value`` and
    quoted values.  If *path* is ``None`` the default ``~/.env`` is used.
    """
    if path is None:
        path = Path.home() / ".env"

    env: dict[str, str] = {}
    if not path.exists():
        return env

    with open(path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            if line.startswith("export "):
                line = line[7:]
            key, value = line.split("=", 1)
            value = value.strip().strip("\"'")
            env[key.strip()] = value

    return env


def get_api_key(key_name: str) -> str:
    """Return an API key from the environment or ``~/.env``.

    Raises ``ConfigurationError`` when the key cannot be found or is blank.
    """
    value = os.environ.get(key_name, "").strip()
    if not value:
        value = load_env_file().get(key_name, "").strip()
    if not value:
        raise ConfigurationError(f"{key_name} is required for the crawler")
    return value


def get_bearer_token(env_name: str = "TWITTER_BEARER_TOKEN") -> str:
    """Return the API bearer token."""
    return get_api_key(env_name)
