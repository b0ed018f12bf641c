"""Shared CLI utilities."""

import sys

from pydantic import ValidationError

from ..auth import get_bearer_token
from ..config import load_settings
from ..errors import ConfigurationError
from ..fetcher import RateLimiter, XApiClient
from ..models import FeelsConfig
from ._console import console


def load_settings_or_exit() -> FeelsConfig:
    """Load validated settings, exiting with status 1 on an invalid config file."""
    try:
        return load_settings()
    except ValidationError as e:
        console.print(f"[red]Invalid configuration:[/red]\n{e}")
        sys.exit(1)


def build_client(settings: FeelsConfig) -> XApiClient:
    """Create the API client from settings; raises ``ConfigurationError`` on a missing token or bad quota."""
    token = get_bearer_token(settings.api.bearer_token_env)
    limiter = RateLimiter(settings.api.rate_limit_per_15min)
    return XApiClient(
        token,
        limiter,
        base_url=settings.api.base_url,
        timeout=settings.api.timeout_seconds,
        user_agent=settings.api.user_agent,
    )


def build_client_or_exit(settings: FeelsConfig) -> XApiClient:
    try:
        return build_client(settings)
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
